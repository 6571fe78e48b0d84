import altair as alt
import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import List

from resource_db.charts import tag_frequency, tag_frequency_chart
from resource_db.config import get_settings
from resource_db.engine import ResourceQueryEngine
from resource_db.errors import ResourceError
from resource_db.filters import normalize_query
from resource_db.pagination import page_window
from resource_db.render import count_message
from resource_db.tags import TAGS_ARRAY_COLUMN

alt.data_transformers.disable_max_rows()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header"><div class="card-title">{title}</div></div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(search_text: str, selected_tags: List[str]) -> str:
    chips = [f"Search: {search_text}" if search_text else "Search: none"]
    chips.append(f"Tags: {', '.join(selected_tags)}" if selected_tags else "Tags: All")
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def display_frame(items: List[dict], columns: List[str]) -> pd.DataFrame:
    if not items:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(items)
    if TAGS_ARRAY_COLUMN in df.columns:
        df[TAGS_ARRAY_COLUMN] = df[TAGS_ARRAY_COLUMN].apply(lambda tags: ", ".join(tags))
    return df[[c for c in columns if c in df.columns]]


# ---------- UI setup ----------
st.set_page_config(page_title="Resource Directory", layout="wide")
inject_base_styles()
st.title("Resource Directory")
st.caption("Search resources by keyword and narrow them down with tags.")

settings = get_settings()
engine = ResourceQueryEngine.from_settings(settings)

try:
    vocabulary = engine.vocabulary()
except ResourceError as exc:
    st.error(str(exc))
    st.stop()

with st.sidebar:
    st.markdown("### Filters")
    search_text = st.text_input("Search", "")
    selected_tags = st.multiselect("Tags", options=vocabulary, default=[])
    page_size = st.selectbox("Rows per page", [10, 25, 50], index=0)
    requested_page = st.number_input("Page", min_value=1, value=1, step=1)

query = normalize_query({"kw": search_text, "tags": selected_tags})

try:
    result = engine.run(query, page_number=int(requested_page), page_size=page_size)
except ResourceError as exc:
    st.error(str(exc))
    st.stop()

st.markdown(
    f"<div class='chip-row'>{format_filter_summary(query.search_text, list(query.selected_tags))}</div>",
    unsafe_allow_html=True,
)

with card("Resources"):
    st.caption(count_message(result))
    page = result.page
    if not page.items:
        st.info("No resources match the current search.")
    else:
        columns = list(result.header)
        if settings.TAG_COLUMN in columns:
            columns[columns.index(settings.TAG_COLUMN)] = TAGS_ARRAY_COLUMN
        st.dataframe(display_frame(page.items, columns), use_container_width=True, hide_index=True)
    pages = page_window(page, settings.PAGE_WINDOW)
    st.caption(f"Page {page.page_number} of {page.total_pages} (nearby pages: {', '.join(str(p) for p in pages)})")

with card("Tag frequency"):
    freq = tag_frequency(engine.records(), settings.TAG_COLUMN)
    if freq.empty:
        st.info("No tags found in the dataset.")
    else:
        st.altair_chart(tag_frequency_chart(freq), use_container_width=True)
