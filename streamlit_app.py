# streamlit_app.py
import time
import json
import requests
import pandas as pd
import streamlit as st

# ---------- Page setup ----------
st.set_page_config(page_title="SQL Sandbox", layout="wide")

st.markdown("""
    <style>
    .main .block-container {padding-top: 2rem; padding-bottom: 3rem; max-width: 1200px;}
    .stTextInput>div>div>input {font-size: 16px; height: 46px;}
    .small-muted {color:#6b7280; font-size:13px;}
    .section-title {font-weight:600; font-size: 18px; margin-top: 1rem;}
    .hr {border-top:1px solid #e5e7eb; margin: 20px 0;}
    </style>
""", unsafe_allow_html=True)

# ---------- Sidebar ----------
with st.sidebar:
    st.header("Settings")
    api_url = st.text_input("API base URL", value="http://127.0.0.1:3001")
    show_schema = st.checkbox("Show table definition and sample data", value=True)
    enable_csv = st.checkbox("Enable CSV download", value=True)
    st.markdown("<div class='small-muted'>The API should be running via <code>python -m sqlsandbox</code>.</div>", unsafe_allow_html=True)

# ---------- Session state ----------
if "history" not in st.session_state:
    st.session_state.history = []  # {prompt, artifacts, df, ms, ok, error}

# ---------- Header ----------
st.title("SQL Sandbox")
st.markdown("<div class='small-muted'>Describe the data you want in English. The model writes a query, a table and sample rows, then the query runs on a throwaway SQLite database.</div>", unsafe_allow_html=True)

# ---------- Input row ----------
col_q, col_btn = st.columns([4, 1])
with col_q:
    prompt = st.text_input("Request", value="", placeholder="e.g., list students older than 20")
with col_btn:
    run_clicked = st.button("Run", type="primary", use_container_width=True)

def _post(api: str, path: str, payload: dict):
    r = requests.post(api.rstrip("/") + path, json=payload, timeout=90)
    try:
        data = r.json()
    except ValueError:
        data = {"error": r.text}
    return r.status_code == 200, data

def call_backend(api: str, text: str):
    """Generate the artifacts, then hand them straight to the execution endpoint."""
    t0 = time.perf_counter()
    try:
        ok, artifacts = _post(api, "/api/generate-sql", {"prompt": text.strip()})
        if not ok:
            return False, {}, pd.DataFrame(), int((time.perf_counter() - t0) * 1000), artifacts.get("error")

        ok, result = _post(api, "/api/execute-sql", artifacts)
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        if not ok:
            return False, artifacts, pd.DataFrame(), elapsed_ms, result.get("error")
        return True, artifacts, pd.DataFrame(result.get("rows", [])), elapsed_ms, None
    except requests.exceptions.RequestException as e:
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        return False, {}, pd.DataFrame(), elapsed_ms, str(e)

def show_artifacts(artifacts: dict):
    if artifacts.get("query"):
        st.markdown("<div class='section-title'>Generated SQL</div>", unsafe_allow_html=True)
        st.code(artifacts["query"], language="sql")
    if show_schema and artifacts.get("tableDefinition"):
        st.markdown("<div class='section-title'>Table</div>", unsafe_allow_html=True)
        seeds = artifacts.get("seedStatements") or []
        st.code("\n".join([artifacts["tableDefinition"], *seeds]), language="sql")

# ---------- Execute ----------
if run_clicked and prompt.strip():
    with st.spinner("Working…"):
        ok, artifacts, df, ms, err = call_backend(api_url, prompt)

    st.session_state.history.insert(0, {
        "prompt": prompt,
        "artifacts": artifacts,
        "df": df,
        "ms": ms,
        "ok": ok,
        "error": err
    })

# ---------- Latest result ----------
if st.session_state.history:
    latest = st.session_state.history[0]
    st.subheader("Result")
    st.markdown(f"<div class='small-muted'>Finished in {latest['ms']} ms</div>", unsafe_allow_html=True)

    show_artifacts(latest["artifacts"])

    if latest["ok"]:
        if latest["df"].empty:
            st.info("No rows returned.")
        else:
            st.dataframe(latest["df"], use_container_width=True, height=420)
            if enable_csv:
                csv = latest["df"].to_csv(index=False).encode("utf-8")
                st.download_button("Download CSV", data=csv, file_name="result.csv", mime="text/csv")
    else:
        st.error("The request did not succeed.")
        st.markdown("<div class='section-title'>Details</div>", unsafe_allow_html=True)
        if isinstance(latest["error"], (dict, list)):
            st.code(json.dumps(latest["error"], indent=2))
        else:
            st.code(str(latest["error"]))

    st.markdown("<div class='hr'></div>", unsafe_allow_html=True)

# ---------- History ----------
st.subheader("History")
if not st.session_state.history:
    st.markdown("<div class='small-muted'>Your recent requests will appear here.</div>", unsafe_allow_html=True)
else:
    for i, item in enumerate(st.session_state.history):
        with st.expander(f"{i+1}. {item['prompt']}  •  {item['ms']} ms"):
            if item["artifacts"].get("query"):
                st.code(item["artifacts"]["query"], language="sql")
            if item["ok"] and not item["df"].empty:
                st.dataframe(item["df"], use_container_width=True, height=260)
            if not item["ok"]:
                st.markdown("<div class='section-title'>Error</div>", unsafe_allow_html=True)
                st.code(str(item["error"]))
