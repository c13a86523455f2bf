import time

import pandas as pd
import streamlit as st

# Configuration
from inventory_store.config import get_config

# InventoryStore interface + factory
from inventory_store.data.errors import NotFoundError
from inventory_store.data.interface import InventoryStore
from inventory_store.data.models import InventoryPayload, U32_MAX
from inventory_store.data.util import get_inventory_store

st.set_page_config(page_title="Inventory Store", layout="wide")

# -----------------------------------------------------------------------------
# Store selection. One store per server process, shared by every session:
# -----------------------------------------------------------------------------
config = get_config()


@st.cache_resource
def load_store(kind: str) -> InventoryStore:
    return get_inventory_store(kind)


store = load_store(config.store_backend)


def items_frame(items) -> pd.DataFrame:
    cols = ["id", "name", "quantity", "price", "created_at", "updated_at"]
    df = pd.DataFrame([item.model_dump() for item in items], columns=cols)
    df["created_at"] = pd.to_datetime(df["created_at"], unit="ns", utc=True)
    df["updated_at"] = pd.to_datetime(df["updated_at"], unit="ns", utc=True)
    return df


# -----------------------------------------------------------------------------
# Sidebar: payload fields shared by add and update
# -----------------------------------------------------------------------------
st.sidebar.header("Item fields")
name = st.sidebar.text_input("Name", key="name")
quantity = st.sidebar.number_input("Quantity", min_value=0, max_value=U32_MAX, value=0, step=1, key="quantity")
price = st.sidebar.number_input("Price", value=0.0, step=0.01, format="%.2f", key="price")
item_id = st.sidebar.number_input("Item id (update / delete / lookup)", min_value=0, value=1, step=1, key="item_id")

payload = InventoryPayload(name=name, quantity=int(quantity), price=float(price))

c1, c2, c3, c4 = st.sidebar.columns(4)
if c1.button("Add", key="add"):
    added = store.add_item(payload)
    if added is None:
        st.error("Item ids are exhausted; nothing was added.")
    else:
        st.success(f"Added item {added.id}")

if c2.button("Update", key="update"):
    try:
        updated = store.update_item(int(item_id), payload)
        st.success(f"Updated item {updated.id}")
    except NotFoundError as e:
        st.error(e.msg)

if c3.button("Delete", key="delete"):
    try:
        removed = store.delete_item(int(item_id))
        st.success(f"Deleted item {removed.id} ({removed.name})")
    except NotFoundError as e:
        st.error(e.msg)

if c4.button("Lookup", key="lookup"):
    try:
        st.json(store.get_item(int(item_id)).model_dump())
    except NotFoundError as e:
        st.error(e.msg)

# -----------------------------------------------------------------------------
# Items table
# -----------------------------------------------------------------------------
t0 = time.perf_counter()
items = store.list_items()
t_list = (time.perf_counter() - t0) * 1000.0

st.markdown("### Items")
c1, c2 = st.columns(2)
c1.metric("Items", f"{len(items):,}")
c2.metric("Units on hand", f"{sum(i.quantity for i in items):,}")
st.dataframe(items_frame(items).head(config.default_page_rows), use_container_width=True)

with st.expander("Store"):
    st.write({"backend": config.store_backend, "data_dir": config.data_dir, "list_items_ms": round(t_list, 2)})
