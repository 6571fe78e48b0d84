from __future__ import annotations

from html import escape
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode

from resource_db.engine import QueryResult
from resource_db.errors import ResourceError
from resource_db.filters import ResourceQuery
from resource_db.pagination import Page, page_window
from resource_db.tags import TAGS_ARRAY_COLUMN, split_tags

PHONE_ICON = "media/phone.svg"
SEARCH_ICON = "media/search.svg"


def _attr(value: object) -> str:
    return escape(str(value), quote=True)


def page_url(base_url: str, query: ResourceQuery, page_number: Optional[int] = None) -> str:
    params: List[tuple] = []
    if query.search_text:
        params.append(("kw", query.search_text))
    for tag in query.selected_tags:
        params.append(("tags", tag))
    if page_number is not None:
        params.append(("pg", page_number))
    qs = urlencode(params)
    return f"{base_url}?{qs}" if qs else (base_url or "?")


def count_message(result: QueryResult) -> str:
    if result.is_filtered:
        return f"Showing {result.total_after_filter} filtered resources"
    return f"Showing all {result.total_after_filter} resources"


def render_search_form(query: ResourceQuery, *, base_url: str = "", asset_url: str = "") -> str:
    hidden = "".join(f'<input type="hidden" name="tags" value="{_attr(t)}">' for t in query.selected_tags)
    return (
        '<div class="search-controls">'
        f'<form class="search-wrapper" method="get" action="{_attr(base_url)}">'
        f'<input type="text" id="resourceSearch" name="kw" placeholder="Search database..." value="{_attr(query.search_text)}">'
        f"{hidden}"
        '<button type="submit" class="search-button" aria-label="Search">'
        f'<img src="{_attr(asset_url + SEARCH_ICON)}" alt="Search"></button>'
        "</form>"
        f'<a class="reset-button" href="{_attr(base_url or "?")}"><span>×</span> Reset Filters</a>'
        "</div>"
    )


def _tag_button(tag: str, selected: Iterable[str], css_class: str, base_url: str, query: ResourceQuery) -> str:
    selected = list(selected)
    is_selected = tag in selected
    toggled = [t for t in selected if t != tag] if is_selected else selected + [tag]
    href = page_url(base_url, ResourceQuery(query.search_text, tuple(toggled)))
    state = " selected" if is_selected else ""
    return f'<a class="{css_class}{state}" data-tag="{_attr(tag)}" href="{_attr(href)}">{escape(tag)}</a>'


def render_filter_tags(all_tags: List[str], query: ResourceQuery, *, base_url: str = "") -> str:
    buttons = "".join(_tag_button(t, query.selected_tags, "tag", base_url, query) for t in all_tags if t)
    return f'<div class="tags-container" id="filterTags">{buttons}</div>'


def render_row(resource: Dict[str, Any], query: ResourceQuery, *, base_url: str = "", asset_url: str = "") -> str:
    name = escape(str(resource.get("Resource", "") or ""))
    website = str(resource.get("Website", "") or "")
    phone = str(resource.get("PhoneNumber", "") or "")
    description = escape(str(resource.get("Description", "") or ""))
    keywords = resource.get(TAGS_ARRAY_COLUMN)
    if keywords is None:
        keywords = split_tags(resource.get("Keywords", ""))

    if website:
        name_cell = f'<a href="{_attr(website)}" target="_blank" rel="noopener noreferrer">{name}</a>'
    else:
        name_cell = name

    phone_html = ""
    if phone:
        phone_html = (
            '<div class="phone-num-container">'
            f'<img src="{_attr(asset_url + PHONE_ICON)}" alt="Phone" class="phone-icon">'
            f'<span class="phone-num">{escape(phone)}</span></div>'
        )

    tag_html = "".join(_tag_button(k, query.selected_tags, "table-tag", base_url, query) for k in keywords if k)
    return (
        "<tr>"
        f"<td>{name_cell}</td>"
        f'<td>{phone_html}<div class="description">{description}</div></td>'
        f'<td><div class="tag-container">{tag_html}</div></td>'
        "</tr>"
    )


def render_table(items: List[Dict[str, Any]], query: ResourceQuery, *, base_url: str = "", asset_url: str = "") -> str:
    rows = "".join(render_row(r, query, base_url=base_url, asset_url=asset_url) for r in items)
    return (
        '<div id="resourceTableContainer"><table class="csv-table">'
        "<thead><tr><th>Resource</th><th>Resource Description</th><th>Keywords</th></tr></thead>"
        f'<tbody id="resourceTableBody">{rows}</tbody></table></div>'
    )


def render_pagination(page: Page, query: ResourceQuery, *, base_url: str = "", radius: int = 2) -> str:
    if page.total_pages <= 1:
        return ""
    parts = ['<div class="pagination" role="navigation" aria-label="Resource list pagination">']
    if page.has_previous:
        href = _attr(page_url(base_url, query, page.page_number - 1))
        parts.append(f'<a class="page-np" href="{href}" aria-label="Go to previous page">&lt;</a>')
    for n in page_window(page, radius):
        if n == page.page_number:
            parts.append(f'<span class="current-page" aria-current="page">{n}</span>')
        else:
            href = _attr(page_url(base_url, query, n))
            parts.append(f'<a class="page-n" href="{href}" aria-label="Go to page {n}">{n}</a>')
    if page.has_next:
        href = _attr(page_url(base_url, query, page.page_number + 1))
        parts.append(f'<a class="page-np" href="{href}" aria-label="Go to next page">&gt;</a>')
    parts.append("</div>")
    return "".join(parts)


def render_resources(
    result: QueryResult,
    query: ResourceQuery,
    *,
    base_url: str = "",
    asset_url: str = "",
    radius: int = 2,
) -> str:
    return "".join(
        [
            '<div class="resources-search-container">',
            render_search_form(query, base_url=base_url, asset_url=asset_url),
            f'<div class="result-count">{escape(count_message(result))}</div>',
            render_filter_tags(result.all_tags, query, base_url=base_url),
            "</div>",
            render_table(result.page.items, query, base_url=base_url, asset_url=asset_url),
            render_pagination(result.page, query, base_url=base_url, radius=radius),
        ]
    )


def render_error(exc: ResourceError) -> str:
    return f'<div class="notice notice-error">{escape(str(exc))}</div>'
