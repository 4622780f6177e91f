import altair as alt
import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import List, Optional, Tuple

from venues import data as vd
from venues.export import to_csv
from venues.filters import RATING_MAX, RATING_MIN
from venues.metrics_charts import compute_charts
from venues.metrics_map import compute_map
from venues.metrics_overview import compute_overview
from venues.metrics_words import compute_word_analysis
from venues.parsers import format_value
from venues.records import records_frame

alt.data_transformers.disable_max_rows()

NO_RECORDS_MESSAGE = "No se encontraron registros con los filtros aplicados."

TABLE_COLUMNS = {
    "name": "Nombre",
    "description": "Descripción",
    "type": "Tipo",
    "route_tags": "Caminos",
    "feature_tags": "Características",
    "rating_raw": "Calificación",
    "review_count_raw": "Opiniones",
    "phone": "Teléfono",
    "email": "Email",
    "website": "Web",
    "facebook_url": "Facebook",
    "instagram_url": "Instagram",
}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #ecfdf5;border: 1px solid #d1fae5;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #047857;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(
    selected_types: List[str],
    selected_route_tags: List[str],
    rating_range: Tuple[float, float],
    review_count_range: Tuple[float, float],
) -> str:
    chips = [f"Tipo: {t}" for t in selected_types] + [f"Camino: {c}" for c in selected_route_tags]
    chips.append(f"Calificación: {rating_range[0]:.1f}–{rating_range[1]:.1f}")
    chips.append(f"Opiniones: {round(review_count_range[0])}–{round(review_count_range[1])}")
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def render_page_header(title: str, breadcrumb: str, filter_summary_html: str, export_csv: Optional[str] = None, export_name: str = "export.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if st.button("Recargar datos"):
            try:
                vd.reload_dashboard_data()
            except vd.DatasetLoadError as exc:
                st.error(f"No se pudo recargar el inventario: {exc}")
            else:
                st.rerun()
        if export_csv is not None:
            st.download_button("Exportar CSV", data=export_csv.encode("utf-8"), file_name=export_name, mime="text/csv")
    st.markdown(f"<div class='chip-row'>{filter_summary_html}</div>", unsafe_allow_html=True)


# ---------- UI setup ----------
st.set_page_config(page_title="Pontevedra · Recursos turísticos", layout="wide")
inject_base_styles()
st.title("Recursos turísticos de Pontevedra")
st.caption("Filtra, tabula, grafica y ubica los registros del inventario turístico.")

try:
    data_ctx = vd.load_dashboard_data()
except vd.DatasetLoadError as exc:
    st.error(f"No se pudo cargar el inventario: {exc}")
    st.stop()

review_count_max = float(data_ctx.get("review_count_max") or 0.0)

# ----- Sidebar: navigation + filters -----
with st.sidebar:
    st.markdown("### Navegar")
    nav_choice = st.radio("Vista", ["Información", "Gráficas", "Análisis de Palabras", "Mapa"], index=0)

    st.markdown("---")
    st.markdown("### Filtros")
    search_term = st.text_input("Buscar", "", placeholder="Nombre, descripción…")
    selected_types = st.multiselect("Tipo", options=data_ctx.get("available_types", []), default=[])
    selected_route_tags = st.multiselect("Camino de Santiago", options=data_ctx.get("available_route_tags", []), default=[])
    rating_range = st.slider("Calificación (1–5)", min_value=RATING_MIN, max_value=RATING_MAX, value=(RATING_MIN, RATING_MAX), step=0.1)
    if review_count_max > 0:
        review_count_range = st.slider(
            f"Opiniones (0–{round(review_count_max)})",
            min_value=0.0,
            max_value=review_count_max,
            value=(0.0, review_count_max),
            step=1.0,
        )
    else:
        review_count_range = (0.0, 0.0)

filters = {
    "search_term": search_term,
    "selected_types": selected_types,
    "selected_route_tags": selected_route_tags,
    "rating_range": rating_range,
    "review_count_range": review_count_range,
}

ctx = vd.prepare_context(filters, data_ctx)
criteria = ctx["filters"]
filtered_records = ctx["filtered_records"]
filter_summary_html = format_filter_summary(selected_types, selected_route_tags, rating_range, review_count_range)


def render_kpis():
    kpis = compute_overview(criteria, ctx)["kpis"]
    cols = st.columns(3)
    cols[0].metric("Total Registros", kpis["total_records"])
    cols[1].metric("Categorías", kpis["unique_types"])
    cols[2].metric("Caminos", kpis["route_tags"])


def render_info_page():
    render_page_header("Información", "Inicio / Información", filter_summary_html, export_csv=to_csv(filtered_records), export_name="informacion.csv")
    render_kpis()
    if not filtered_records:
        st.info(NO_RECORDS_MESSAGE)
        return
    view_format = st.radio("Formato", ["Tabla", "Tarjetas"], horizontal=True)
    if view_format == "Tabla":
        table = records_frame(filtered_records, list(TABLE_COLUMNS))
        table = table.apply(lambda col: col.map(format_value)).rename(columns=TABLE_COLUMNS)
        st.dataframe(table, use_container_width=True, hide_index=True)
        return
    cols = st.columns(3)
    for idx, record in enumerate(filtered_records):
        with cols[idx % 3]:
            with card(record.name or "—"):
                if record.image_urls:
                    st.image(record.image_urls[0], use_container_width=True)
                st.caption(" · ".join(p for p in [record.type, record.city] if p))
                st.write(record.description[:200] + ("…" if len(record.description) > 200 else ""))
                if record.route_tags:
                    st.markdown(" ".join(f"`{t}`" for t in record.route_tags))
                st.caption(f"Calificación: {format_value(record.rating_raw) or '—'} · Opiniones: {format_value(record.review_count_raw) or '—'}")


def render_charts_page():
    render_page_header("Gráficas", "Inicio / Gráficas", filter_summary_html, export_csv=to_csv(filtered_records), export_name="graficas.csv")
    payload = compute_charts(criteria, ctx)
    if payload["empty"]:
        st.info(NO_RECORDS_MESSAGE)
        return
    titles = {
        "by_type": "Registros por tipo",
        "by_route_tag": "Registros por Camino de Santiago",
        "rating_by_type": "Promedio de calificación por tipo",
        "review_count_by_type": "Promedio de opiniones por tipo",
    }
    names = list(titles)
    for row in (names[:2], names[2:]):
        chart_cols = st.columns(2)
        for col, name in zip(chart_cols, row):
            with col:
                with card(titles[name]):
                    spec = payload["charts"].get(name)
                    if spec is None:
                        st.info("Sin datos")
                    else:
                        st.vega_lite_chart(spec, use_container_width=True)


def render_words_page():
    render_page_header("Análisis de Palabras", "Inicio / Palabras", filter_summary_html)
    payload = compute_word_analysis(criteria, ctx)
    if payload["empty"] or not payload["cloud_words"]:
        st.info("No hay datos disponibles para el análisis de palabras.")
        return
    with card("Palabras más usadas en los nombres"):
        st.dataframe(pd.DataFrame(payload["cloud_words"]), use_container_width=True, hide_index=True)
    with card("Frecuencia de palabras (Top 15)"):
        st.vega_lite_chart(payload["charts"]["top_words"], use_container_width=True)


def render_map_page():
    render_page_header("Mapa", "Inicio / Mapa", filter_summary_html)
    payload = compute_map(criteria, ctx)
    if payload["empty"]:
        st.info("No se encontraron registros para mostrar en el mapa")
        return
    markers = pd.DataFrame(payload["markers"])
    map_cols = st.columns([4, 1])
    with map_cols[0]:
        st.map(markers, latitude="lat", longitude="lng", zoom=payload["zoom"])
    with map_cols[1]:
        with card("Leyenda de tipos"):
            for item in payload["legend"]:
                st.markdown(f"{item['icon']} {item['type']}")


if nav_choice == "Información":
    render_info_page()
elif nav_choice == "Gráficas":
    render_charts_page()
elif nav_choice == "Análisis de Palabras":
    render_words_page()
else:
    render_map_page()
