"""
Channel Site Builder - Streamlit Frontend

Project list, assistant chat, website generation with live preview,
GitHub sync and Netlify deploys. Connects to the FastAPI backend for processing.

Run with: streamlit run streamlit_app.py
"""
import os
import uuid

import requests
import streamlit as st
import streamlit.components.v1 as components

# ============================================================
# Configuration
# ============================================================

API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")

st.set_page_config(
    page_title="Channel Site Builder",
    page_icon="🎬",
    layout="wide",
    initial_sidebar_state="expanded"
)

# ============================================================
# Custom CSS
# ============================================================

st.markdown("""
<style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap');

    html, body, [class*="css"], .stMarkdown, .stText, p {
        font-family: 'Inter', sans-serif;
        color: #334155 !important;
    }

    .stApp {
        background-color: #fafafa;
    }

    h1, h2, h3, h4 {
        font-weight: 700;
        color: #0f172a !important;
        letter-spacing: -0.5px;
    }

    .main .block-container {
        padding-top: 2rem;
        padding-bottom: 3rem;
    }

    [data-testid="stSidebar"] {
        background-color: #f4f4f5;
        border-right: 1px solid #e5e7eb;
    }

    .stChatMessage {
        background-color: #ffffff;
        border-radius: 12px;
        border: 1px solid #f3f4f6;
    }

    .stButton > button {
        border-radius: 8px;
        font-weight: 600;
    }
    .stButton > button:hover {
        border-color: #ff0000;
        color: #ff0000;
    }
</style>
""", unsafe_allow_html=True)


# ============================================================
# Session State Initialization
# ============================================================

def init_session_state():
    """Initialize session state variables."""
    if "user_id" not in st.session_state:
        st.session_state.user_id = str(uuid.uuid4())
    if "user_role" not in st.session_state:
        st.session_state.user_role = "user"
    if "project_id" not in st.session_state:
        st.session_state.project_id = None
    if "messages" not in st.session_state:
        st.session_state.messages = []
    if "backend_connected" not in st.session_state:
        st.session_state.backend_connected = False


def _headers() -> dict:
    return {
        "X-User-Id": st.session_state.user_id,
        "X-User-Role": st.session_state.user_role,
    }


def _error_message(response: requests.Response) -> str:
    """Pull the message out of the backend's error body."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if "message" in body:
        return body["message"]
    detail = body.get("detail", "Unknown error")
    if isinstance(detail, list) and detail:
        return detail[0].get("msg", str(detail))
    return str(detail)


def api(method: str, path: str, timeout: int = 30, **kwargs) -> dict:
    """
    Call the backend.

    Returns the JSON body, or {"error": "..."} on any failure so the
    UI can show it without crashing.
    """
    try:
        response = requests.request(
            method, f"{API_BASE_URL}{path}", headers=_headers(), timeout=timeout, **kwargs
        )
    except requests.exceptions.Timeout:
        return {"error": "Request timed out. The providers may be busy, try again."}
    except requests.exceptions.ConnectionError:
        return {"error": "Cannot connect to backend server."}

    if response.status_code == 204:
        return {}
    if response.status_code == 429:
        return {"error": "Rate limit exceeded. Please wait a moment."}
    if response.status_code >= 400:
        return {"error": _error_message(response)}
    return response.json()


def check_backend() -> bool:
    """Check if backend is available."""
    try:
        response = requests.get(f"{API_BASE_URL}/health", timeout=10)
        st.session_state.backend_connected = response.status_code == 200
    except requests.exceptions.RequestException:
        st.session_state.backend_connected = False
    return st.session_state.backend_connected


def load_history(project_id: str):
    """Load the chat history of a project into the session."""
    data = api("GET", f"/projects/{project_id}/history")
    st.session_state.messages = [
        {"role": m["role"], "content": m["content"]}
        for m in data.get("messages", [])
    ]


def select_project(project_id: str):
    st.session_state.project_id = project_id
    load_history(project_id)


# ============================================================
# Sidebar
# ============================================================

def render_provider_status():
    data = api("GET", "/providers/status", timeout=10)
    if "error" in data:
        return
    parts = [
        f"{'🟢' if p['configured'] else '⚪'} {p['name']}"
        for p in data.get("providers", [])
    ]
    st.caption("  ".join(parts) or "No providers configured")
    if not data.get("available"):
        st.info("No LLM keys configured: generation uses the built-in template.")


def render_new_project_form():
    limits = api("GET", "/projects/limits", timeout=10)
    if "error" not in limits:
        st.progress(
            min(limits["usage_percentage"], 100) / 100,
            text=f"{limits['count']} / {limits['max_projects']} projects"
        )

    with st.form("new_project", clear_on_submit=True):
        name = st.text_input("Project name")
        youtube_url = st.text_input("YouTube channel URL", placeholder="https://www.youtube.com/@handle")
        description = st.text_area("Description", height=80)
        submitted = st.form_submit_button("➕ Create", use_container_width=True)

    if submitted:
        if not name.strip():
            st.warning("Give the project a name.")
            return
        payload = {"name": name.strip(), "description": description.strip() or None}
        if youtube_url.strip():
            payload["youtube_url"] = youtube_url.strip()
        with st.spinner("Creating project..."):
            result = api("POST", "/projects", json=payload, timeout=60)
        if "error" in result:
            st.error(f"❌ {result['error']}")
        else:
            select_project(result["id"])
            st.rerun()


def render_sidebar():
    """Render the sidebar: identity, providers, projects."""
    with st.sidebar:
        st.title("🎬 Channel Site Builder")
        st.markdown("*Websites for YouTube creators*")

        if st.session_state.backend_connected:
            st.success("🟢 System Online")
        else:
            st.error("🔴 System Offline")
            if st.button("🔄 Reconnect", use_container_width=True):
                if check_backend():
                    st.rerun()
            st.warning("Server is unreachable. Please check backend console.")
            return

        render_provider_status()

        with st.expander("👤 Account", expanded=False):
            st.session_state.user_id = st.text_input("User ID", value=st.session_state.user_id)
            st.session_state.user_role = st.selectbox(
                "Role", ["user", "admin"],
                index=0 if st.session_state.user_role == "user" else 1
            )

        st.divider()
        st.subheader("📁 Projects")

        data = api("GET", "/projects", timeout=10)
        if "error" in data:
            st.error(data["error"])
        else:
            for project in data.get("projects", []):
                selected = project["id"] == st.session_state.project_id
                label = f"{'▶ ' if selected else ''}{project['name']}"
                if st.button(label, key=f"proj_{project['id']}", use_container_width=True):
                    select_project(project["id"])
                    st.rerun()

        with st.expander("➕ New Project", expanded=not data.get("projects")):
            render_new_project_form()


# ============================================================
# Main Panels
# ============================================================

def render_chat(project_id: str):
    """Assistant chat and generation requests."""
    for msg in st.session_state.messages:
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])

    mode = st.radio(
        "Mode",
        ["Build / edit site", "Ask the assistant"],
        horizontal=True,
        label_visibility="collapsed"
    )

    if prompt := st.chat_input("Describe your website or the change you want..."):
        st.session_state.messages.append({"role": "user", "content": prompt})
        with st.chat_message("user"):
            st.markdown(prompt)

        with st.chat_message("assistant"):
            if mode == "Ask the assistant":
                with st.spinner("Thinking..."):
                    result = api("POST", f"/projects/{project_id}/chat", json={"message": prompt}, timeout=120)
                reply = result.get("error") or result.get("reply", "")
            else:
                with st.spinner("Generating website..."):
                    result = api(
                        "POST", f"/projects/{project_id}/generate",
                        json={"user_request": prompt, "preserve_design": True},
                        timeout=300
                    )
                if "error" in result:
                    reply = f"❌ {result['error']}"
                else:
                    reply = result["reply"]
                    if result.get("targeted"):
                        st.caption(f"🎯 {result.get('target_component')} ({result.get('change_scope')})")
                    st.caption(f"Provider: {result['provider']} · quality: {result['code_quality']}")
            st.markdown(reply)

        st.session_state.messages.append({"role": "assistant", "content": reply})
        st.rerun()

    if st.session_state.messages and st.button("🗑️ Clear chat"):
        api("DELETE", f"/projects/{project_id}/history")
        st.session_state.messages = []
        st.rerun()


def render_preview(project_id: str):
    """Live preview of the generated page."""
    try:
        response = requests.get(
            f"{API_BASE_URL}/projects/{project_id}/preview", headers=_headers(), timeout=30
        )
    except requests.exceptions.RequestException as e:
        st.error(f"Preview unavailable: {e}")
        return

    if response.status_code != 200:
        st.error(_error_message(response))
        return

    components.html(response.text, height=800, scrolling=True)
    st.download_button("⬇️ Download index.html", response.text, file_name="index.html", mime="text/html")


def render_sync(project_id: str, project: dict):
    """GitHub sync controls and last status."""
    if project.get("github_url"):
        st.markdown(f"Repository: [{project['github_url']}]({project['github_url']})")
    else:
        st.caption("No repository yet. The first sync creates one.")

    commit_message = st.text_input("Commit message", value="AI Website Update")
    if st.button("🚀 Sync to GitHub", type="primary", disabled=not project.get("source_code")):
        with st.spinner("Pushing files..."):
            result = api(
                "POST", f"/projects/{project_id}/sync/github",
                json={"commit_message": commit_message, "create_repo": not project.get("github_url")},
                timeout=120
            )
        if "error" in result:
            st.error(f"❌ {result['error']}")
        elif result["sync_status"] == "success":
            st.success(result["message"])
        else:
            st.warning(result["message"])
            for item in result.get("results", []):
                if not item["success"]:
                    st.caption(f"❌ {item['path']}: {item['error']}")

    status = api("GET", f"/projects/{project_id}/sync/github", timeout=10)
    if "error" not in status and status.get("sync_status") != "never":
        c1, c2, c3 = st.columns(3)
        c1.metric("Last sync", status["sync_status"])
        c2.metric("Files", status["files_synced"])
        c3.metric("Commit", status.get("commit_hash") or "-")


def render_deploy(project_id: str, project: dict):
    """Netlify deploy controls."""
    if project.get("netlify_url"):
        st.markdown(f"Live site: [{project['netlify_url']}]({project['netlify_url']})")
    else:
        st.caption("Not deployed yet. The first deploy creates a Netlify site.")

    if st.button("🌐 Deploy to Netlify", type="primary", disabled=not project.get("source_code")):
        with st.spinner("Deploying..."):
            result = api("POST", f"/projects/{project_id}/deploy/netlify", json={}, timeout=180)
        if "error" in result:
            st.error(f"❌ {result['error']}")
        elif result["state"] == "ready":
            st.success(result["message"])
        else:
            st.info(result["message"])


def render_project():
    project_id = st.session_state.project_id
    project = api("GET", f"/projects/{project_id}")
    if "error" in project:
        st.error(project["error"])
        st.session_state.project_id = None
        return

    st.header(project["name"])
    channel = project.get("channel_data") or {}
    if channel:
        c1, c2, c3 = st.columns(3)
        c1.metric("Subscribers", f"{channel.get('subscriber_count', 0):,}")
        c2.metric("Videos", f"{channel.get('video_count', 0):,}")
        c3.metric("Views", f"{channel.get('view_count', 0):,}")

    chat_tab, preview_tab, sync_tab, deploy_tab = st.tabs(["💬 Chat", "🖥️ Preview", "🐙 GitHub", "🌐 Netlify"])
    with chat_tab:
        render_chat(project_id)
    with preview_tab:
        render_preview(project_id)
    with sync_tab:
        render_sync(project_id, project)
    with deploy_tab:
        render_deploy(project_id, project)

    with st.expander("⚠️ Danger zone"):
        if st.button("Delete project", type="primary"):
            api("DELETE", f"/projects/{project_id}")
            st.session_state.project_id = None
            st.session_state.messages = []
            st.rerun()


# ============================================================
# Main App
# ============================================================

def main():
    """Main application entry point."""
    init_session_state()

    if not st.session_state.backend_connected:
        check_backend()

    render_sidebar()

    if not st.session_state.backend_connected:
        st.warning("⚠️ Cannot connect to backend. Please start the server:")
        st.code("uvicorn channelsite.api.main:app --reload --port 8000", language="bash")
        return

    if st.session_state.project_id is None:
        st.header("Build a website for your channel")
        st.markdown("Create a project in the sidebar, then describe the site you want.")
        return

    render_project()


if __name__ == "__main__":
    main()
