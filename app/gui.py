import streamlit as st

# MUST be the first Streamlit command
st.set_page_config(layout="wide", page_title="AEJU — Portfolio")

import html
import logging

from auth_gate import AuthGate, GateState
from config import STORAGE_DIR, get_log_level
from content_store import ContentStore
from errors import ConfirmationRequiredError, InvalidEditError, PersistenceError
from generator_page import site_to_html
from image_ingestor import APPLIED, FAILED, PROFILE_TARGET, ImageIngestor, accept_url
from schema_site import describe_image_ref
from storage import LocalStorage
from thumbnail import resolve
from upload_state import UploadTracker, image_field_key

logging.basicConfig(level=get_log_level(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

# Initialize session state variables
if "store" not in st.session_state:
    st.session_state.store = ContentStore(LocalStorage(STORAGE_DIR))
    st.session_state.store.load()
if "gate" not in st.session_state:
    st.session_state.gate = AuthGate(st.session_state.store)
if "ingestor" not in st.session_state:
    st.session_state.ingestor = ImageIngestor()
if "uploads" not in st.session_state:
    st.session_state.uploads = UploadTracker()

store: ContentStore = st.session_state.store
gate: AuthGate = st.session_state.gate
ingestor: ImageIngestor = st.session_state.ingestor
uploads: UploadTracker = st.session_state.uploads

st.markdown("""
<style>
.stApp { background-color: #0a0a0a !important; color: #ffffff !important; }
.work-card img { width: 100%; aspect-ratio: 16 / 9; object-fit: cover; }
.work-entry { font-family: monospace; font-size: 0.6rem; color: rgba(255,255,255,0.4); }
.work-title { font-weight: 900; text-transform: uppercase; }
.career-date { font-family: monospace; color: rgba(255,255,255,0.4); }
#MainMenu {visibility: hidden;}
footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


# --- Upload helpers ---
def show_outcomes(outcomes) -> bool:
    """Report finished uploads; True if any of them changed the working copy."""
    changed = False
    for outcome in outcomes:
        if outcome.status == APPLIED:
            # keyed inputs ignore value= once rendered, so drop the old URL text
            st.session_state.pop(image_field_key(outcome.ticket.generation, outcome.ticket.target), None)
            changed = True
        elif outcome.status == FAILED:
            st.warning(f"Could not read the uploaded image: {outcome.error}")
    return changed


def handle_upload(uploaded, uploader_key: str, target):
    """Send a newly selected file to the ingestor once, then pick up the result."""
    if uploaded is None:
        return
    if not uploads.first_time(gate.editor.generation, uploader_key, uploaded.name, uploaded.size):
        return
    ingestor.ingest_file(gate.editor, target, uploaded.getvalue())
    with st.spinner("Reading image..."):
        ingestor.wait(timeout=5)
    if show_outcomes(ingestor.apply_completed(gate.session)):
        st.rerun()


# --- Field callbacks (read the widget value from session state) ---
def on_profile_url(key):
    value = st.session_state[key]
    if value != describe_image_ref(gate.editor.working["profileImg"]):
        gate.editor.set_profile_image(accept_url(value))


def on_bio(key):
    gate.editor.set_bio(st.session_state[key])


def on_career(key, index, field):
    gate.editor.update_career_item(index, field, st.session_state[key])


def _work_index(work_id):
    for i, w in enumerate(gate.editor.working["works"]):
        if w["id"] == work_id:
            return i
    raise InvalidEditError(f"no work with id {work_id}")


def on_work(key, work_id, field):
    value = st.session_state[key]
    index = _work_index(work_id)
    current = gate.editor.working["works"][index][field]
    if field == "img":
        if value == describe_image_ref(current):
            return
        value = accept_url(value)
    gate.editor.update_work_field(index, field, value)


# --- Read-only page ---
def render_site(data):
    top_left, top_right = st.columns([6, 1])
    with top_left:
        st.markdown("### AEJU")
    with top_right:
        if st.button("⚙️", help="Admin", key="admin_trigger"):
            gate.trigger()
            st.rerun()

    col_img, col_bio = st.columns([1, 2])
    with col_img:
        if data["profileImg"]:
            st.markdown(f'<img src="{html.escape(data["profileImg"])}" style="width:100%">',
                        unsafe_allow_html=True)
    with col_bio:
        for line in data["bio"].splitlines():
            st.markdown(html.escape(line))

    st.subheader("CAREER")
    for job in data["career"]:
        c1, c2, c3 = st.columns([1, 2, 2])
        c1.markdown(f'<span class="career-date">{html.escape(job["date"])}</span>', unsafe_allow_html=True)
        c2.markdown(f"**{html.escape(job['title'])}**")
        c3.markdown(html.escape(job["role"]))

    st.subheader("WORKS")
    cols = st.columns(3)
    for i, work in enumerate(data["works"]):
        with cols[i % 3]:
            st.markdown(f"""
            <div class="work-card">
              <img src="{html.escape(resolve(work))}" alt="{html.escape(work['title'])}">
              <span class="work-entry">ENTRY_00{work['id']}</span>
              <p class="work-title">{html.escape(work['title'])}</p>
            </div>
            """, unsafe_allow_html=True)
            if work["url"]:
                st.link_button("▶ Open", work["url"], use_container_width=True)

    st.download_button("⬇️ Download page", site_to_html(data), file_name="portfolio.html",
                       mime="text/html")


# --- Admin panel ---
def render_login():
    st.subheader("🔒 Admin")
    with st.form("admin_login", clear_on_submit=True):
        candidate = st.text_input("Key", type="password", value=gate.candidate_input)
        submitted = st.form_submit_button("Enter")
    if submitted:
        if gate.verify(candidate):
            st.rerun()
    if gate.notice:
        st.error(gate.notice)
    if st.button("Close", key="close_locked"):
        gate.close()
        st.rerun()


def render_editor():
    session = gate.editor
    gen = session.generation
    # late uploads from a previous rerun
    show_outcomes(ingestor.apply_completed(session))
    working = session.working

    st.subheader("✏️ Edit content")

    st.markdown("**Profile image**")
    col_prev, col_in = st.columns([1, 3])
    with col_prev:
        if working["profileImg"]:
            st.markdown(f'<img src="{html.escape(working["profileImg"])}" style="width:100%">',
                        unsafe_allow_html=True)
    with col_in:
        key = f"profile_upload_{gen}"
        handle_upload(st.file_uploader("Upload image", type=["png", "jpg", "jpeg", "gif", "webp"], key=key),
                      key, PROFILE_TARGET)
        key = image_field_key(gen, PROFILE_TARGET)
        st.text_input("…or image URL", value=describe_image_ref(working["profileImg"]), key=key,
                      on_change=on_profile_url, args=(key,))

    key = f"bio_{gen}"
    st.text_area("Bio", value=working["bio"], key=key, on_change=on_bio, args=(key,))

    st.markdown("**Career**")
    for i, job in enumerate(working["career"]):
        cols = st.columns(3)
        for col, field in zip(cols, ("date", "title", "role")):
            key = f"career_{gen}_{i}_{field}"
            col.text_input(field.title(), value=job[field], key=key,
                           on_change=on_career, args=(key, i, field))

    head, add = st.columns([4, 1])
    head.markdown("**Works**")
    if add.button("➕ Add", key=f"add_work_{gen}"):
        session.add_work()
        st.rerun()

    for i, work in enumerate(working["works"]):
        wid = work["id"]
        with st.container(border=True):
            title_col, del_col = st.columns([4, 1])
            key = f"work_{gen}_{wid}_title"
            title_col.text_input(f"ENTRY_00{wid} title", value=work["title"], key=key,
                                 on_change=on_work, args=(key, wid, "title"))
            if del_col.button("🗑️", key=f"remove_{gen}_{wid}"):
                session.remove_work(i)
                st.rerun()
            key = f"work_{gen}_{wid}_url"
            st.text_input("Link URL", value=work["url"], key=key,
                          on_change=on_work, args=(key, wid, "url"))
            img_col, up_col = st.columns(2)
            key = image_field_key(gen, wid)
            img_col.text_input("Thumbnail URL", value=describe_image_ref(work["img"]), key=key,
                               on_change=on_work, args=(key, wid, "img"))
            with up_col:
                key = f"work_upload_{gen}_{wid}"
                handle_upload(st.file_uploader("Upload thumbnail", type=["png", "jpg", "jpeg", "gif", "webp"],
                                               key=key), key, wid)

    st.divider()
    save_col, close_col = st.columns(2)
    if save_col.button("💾 Save", type="primary", key=f"save_{gen}"):
        try:
            gate.save()
        except PersistenceError as e:
            st.error(f"Saving failed, nothing was changed: {e}")
        else:
            st.rerun()
    if close_col.button("Close", key=f"close_{gen}"):
        gate.close()
        st.rerun()

    with st.expander("Factory reset"):
        confirmed = st.checkbox("Restore all content to the initial state. This cannot be undone.",
                                key=f"reset_confirm_{gen}")
        if st.button("FACTORY RESET", key=f"reset_{gen}"):
            try:
                gate.reset(confirmed=confirmed)
            except ConfirmationRequiredError:
                st.warning("Tick the box to confirm the reset first.")
            except PersistenceError as e:
                st.error(f"Reset failed: {e}")
            else:
                st.rerun()


# --- Page ---
if gate.state is GateState.LOCKED:
    uploads.clear()
    render_login()
elif gate.state is GateState.UNLOCKED:
    render_editor()
else:
    uploads.clear()
    if gate.notice:
        st.success(gate.notice)
        gate.notice = ""
    # uploads that finished after the editor was closed
    ingestor.apply_completed(None)
    render_site(store.data)
