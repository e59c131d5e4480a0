"""
Extract Google Maps Leads - Streamlit Web Application

Search Google Maps for businesses, collect their contact details page by
page, and download them as an Excel sheet. Access is gated behind a shared
key that is remembered for a day.
"""
import logging
from datetime import datetime
from html import escape

import extra_streamlit_components as stx
import streamlit as st

from maps_leads import (
    GOOGLE_MAPS_API_KEY,
    AccessGate,
    CookieSessionStore,
    PlacesProvider,
    SearchController,
    VIEW_RESULTS,
    export_results,
    get_summary_stats,
    generate_place_link,
    photo_url,
    website_hostname,
)
from maps_leads.config import ACCESS_KEY, PAGE_TITLE, PAGE_ICON, EXCEL_MIME, REFRESH_INTERVAL

logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title=PAGE_TITLE,
    page_icon=PAGE_ICON,
    layout="wide"
)


# Load custom CSS
def load_css():
    """Load custom CSS styles."""
    css = """
    <style>
    @import url('https://fonts.googleapis.com/css2?family=Readex+Pro:wght@300;400;500;600;700&display=swap');

    * {font-family: 'Readex Pro', sans-serif;}

    .lead-card {
        background-color: #f0f2f6;
        border-radius: 10px;
        padding: 0 0 15px 0;
        margin-bottom: 20px;
        overflow: hidden;
    }

    .lead-img {
        width: 100%;
        height: 200px;
        object-fit: cover;
    }

    .lead-name {
        font-weight: 600;
        font-size: 1.1rem;
        padding: 10px 15px 5px 15px;
    }

    .lead-detail {
        padding: 2px 15px;
        font-size: 0.9rem;
    }

    .lead-detail a:hover {
        color: #B87333 !important;
    }
    </style>
    """
    st.markdown(css, unsafe_allow_html=True)

load_css()


def get_gate() -> AccessGate:
    """
    Access gate backed by this visitor's browser cookie.

    The cookie manager is a component and has to be rendered on every run.
    """
    cookie_manager = stx.CookieManager(key="access_cookies")
    return AccessGate(CookieSessionStore(cookie_manager), secret=ACCESS_KEY)


def get_controller() -> SearchController:
    """Search controller, created once per browser session."""
    if 'controller' not in st.session_state:
        provider = None
        if GOOGLE_MAPS_API_KEY:
            try:
                provider = PlacesProvider.from_api_key(GOOGLE_MAPS_API_KEY)
            except ValueError as e:
                logger.error(f"Could not create Google Maps client: {e}")
        st.session_state.controller = SearchController(provider)
    return st.session_state.controller


def require_access(gate: AccessGate):
    """Show the login form and stop the script until access is granted."""
    if st.session_state.get('authenticated'):
        return

    if gate.restore_session():
        st.session_state.authenticated = True
        return

    st.markdown(
        "<h1 style='text-align: center;'>🔒 Enter Access Key</h1>",
        unsafe_allow_html=True
    )

    with st.form("login_form"):
        entered = st.text_input("Access key", type="password", key="access_key_input")
        login_clicked = st.form_submit_button(
            "Unlock",
            type="primary",
            use_container_width=True,
            key="login_submit"
        )

    if login_clicked:
        if gate.check_access(entered):
            st.session_state.authenticated = True
            st.rerun()
        else:
            st.error("Invalid access key. Please try again.")

    st.stop()


def render_sidebar(gate: AccessGate):
    with st.sidebar:
        st.header("About")
        st.markdown("""
        Search Google Maps and extract business contact details.

        **Features:**
        - Search any place query
        - Get phone numbers, websites & ratings
        - Load more pages of results
        - Export to Excel
        """)

        if gate.enabled:
            st.divider()
            if st.button("🚪 Log out", use_container_width=True, key="logout"):
                gate.revoke()
                st.session_state.authenticated = False
                st.rerun()


def render_search(controller: SearchController, state):
    """Search form."""
    st.markdown(
        "<h1 style='text-align: center;'>🔍 Extract Google Maps Leads</h1>",
        unsafe_allow_html=True
    )

    if state.error:
        st.error(state.error)

    with st.form("search_form"):
        query = st.text_input(
            "Search query",
            value=state.query,
            placeholder="e.g. Restaurant in Karachi",
            disabled=state.loading,
            key="search_query_input"
        )
        search_clicked = st.form_submit_button(
            "Searching..." if state.loading else "🔍 Search Now",
            type="primary",
            disabled=state.loading,
            use_container_width=True,
            key="search_submit"
        )

    if search_clicked:
        with st.spinner("Fetching results from Google Maps..."):
            controller.submit_search(query)
        st.rerun()


def render_result_card(place: dict):
    """Render one result as an HTML card."""
    name = escape(str(place.get('name') or 'N/A'))
    address = escape(str(place.get('formatted_address') or 'N/A'))
    phone = escape(str(place.get('formatted_phone_number') or 'N/A'))
    image = escape(photo_url(place, GOOGLE_MAPS_API_KEY), quote=True)

    website = place.get('website')
    if website:
        website_html = (
            f"<a href='{escape(website, quote=True)}' target='_blank' rel='noopener noreferrer'>"
            f"{escape(website_hostname(website))}</a>"
        )
    else:
        website_html = "N/A"

    html_parts = [
        "<div class='lead-card'>",
        f"<img class='lead-img' src='{image}' alt='{name}'>",
        f"<div class='lead-name'>{name}</div>",
        f"<div class='lead-detail'>📍 {address}</div>",
        f"<div class='lead-detail'>📞 {phone}</div>",
        f"<div class='lead-detail'>🌐 {website_html}</div>",
    ]

    if place.get('rating'):
        reviews = place.get('user_ratings_total') or 0
        html_parts.append(
            f"<div class='lead-detail'>⭐ {escape(str(place['rating']))} ({reviews} reviews)</div>"
        )

    maps_link = generate_place_link(place)
    if maps_link:
        html_parts.append(
            f"<div class='lead-detail'><a href='{escape(maps_link, quote=True)}' "
            f"target='_blank'>🗺️ Open in Google Maps</a></div>"
        )

    html_parts.append("</div>")
    st.markdown(''.join(html_parts), unsafe_allow_html=True)


def get_export(state):
    """
    Workbook bytes and filename for the current results.

    Rebuilt only when the search or the number of results changes.
    """
    cache_key = (state.generation, len(state.results))
    cached = st.session_state.get('export_cache')
    if cached is None or cached[0] != cache_key:
        cached = (cache_key, export_results(state.results, state.query))
        st.session_state.export_cache = cached
    return cached[1]


def render_results(controller: SearchController, state):
    """Results grid with pagination and export controls."""
    if st.button("⬅️ Back to Search", key="back_to_search"):
        controller.back_to_search()
        st.rerun()

    st.subheader(f"🔍 Results for: *{state.query}*")
    st.caption("Showing extracted business contact details")

    if state.error:
        st.error(state.error)

    if state.loading:
        st.info("⏳ Fetching results from Google Maps...")

    results = state.results

    if results:
        # Summary metrics
        stats = get_summary_stats(results)
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Total Places", stats['total_places'])
        col2.metric("With Phone", stats['with_phone'])
        col3.metric("With Website", stats['with_website'])
        col4.metric("Avg Rating", stats['avg_rating'])

        st.divider()

        columns = st.columns(3)
        for idx, place in enumerate(results):
            with columns[idx % 3]:
                render_result_card(place)

        st.divider()

        col1, col2 = st.columns(2)

        with col1:
            excel_bytes, file_name = get_export(state)
            st.download_button(
                label="📥 Download Excel",
                data=excel_bytes,
                file_name=file_name,
                mime=EXCEL_MIME,
                use_container_width=True
            )

        with col2:
            if state.has_more:
                if st.button(
                    "Loading..." if state.loading else "Load More",
                    disabled=state.loading,
                    use_container_width=True,
                    key="load_more"
                ):
                    controller.load_more()
                    st.rerun()

    elif not state.loading and not state.error and not controller.pending:
        st.info("🗺️ No results found. Please try a different search.")


def progress_marker(state) -> tuple:
    return (state.generation, len(state.results), state.loading, state.error)


@st.fragment(run_every=REFRESH_INTERVAL)
def watch_progress(controller: SearchController, rendered: tuple):
    """Rerun the page once in-flight work changes what is on screen."""
    if progress_marker(controller.snapshot()) != rendered:
        st.rerun()


def main():
    """Main application function."""
    gate = get_gate()
    require_access(gate)

    controller = get_controller()
    render_sidebar(gate)

    state = controller.snapshot()

    if state.view == VIEW_RESULTS:
        render_results(controller, state)
    else:
        render_search(controller, state)

    # Footer
    st.divider()
    st.markdown(
        f"""
        <div style="text-align: center; padding: 20px; color: gray;">
            &copy; {datetime.now().year} | Extract Google Maps Leads
        </div>
        """,
        unsafe_allow_html=True
    )

    # Detail lookups or a delayed page are still in flight
    rendered = progress_marker(state)
    if controller.busy or progress_marker(controller.snapshot()) != rendered:
        watch_progress(controller, rendered)


if __name__ == "__main__":
    main()
