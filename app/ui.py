# Run from project root: streamlit run app/ui.py
# UI talks to backend API: POST /basic, /rag/upload, /rag/query, /tools, /agent. One tab per pattern.

import json
import os

import requests
import streamlit as st

# Backend config
API_BASE = os.environ.get("API_BASE", "http://localhost:8000")
TIMEOUT = 120


def _post(path: str, **kwargs) -> dict | None:
    """POST to the backend; show the error inline and return None on failure."""
    try:
        r = requests.post(f"{API_BASE}{path}", timeout=TIMEOUT, **kwargs)
    except requests.RequestException as e:
        st.error(f"Request failed: {e}")
        return None
    try:
        data = r.json()
    except ValueError:
        data = {}
    if not r.ok:
        st.error(data.get("error") or f"{r.status_code}: {r.text[:200]}")
        return None
    return data


st.title("LLM Patterns")
st.caption("Direct prompting, retrieval-augmented generation, tool calling and multi-step agents.")

basic_tab, rag_tab, tools_tab, agent_tab = st.tabs(["Basic", "RAG", "Tools", "Agent"])

with basic_tab:
    prompt = st.text_area("Prompt", key="basic_prompt")
    if st.button("Send", key="basic_send") and prompt.strip():
        with st.spinner("Thinking..."):
            data = _post("/basic", json={"prompt": prompt})
        if data:
            st.markdown(data.get("response", ""))

with rag_tab:
    uploaded = st.file_uploader("Upload a text document", type=["txt", "md"])
    if st.button("Upload", key="rag_upload") and uploaded:
        with st.spinner("Embedding paragraphs..."):
            data = _post("/rag/upload", files={"file": (uploaded.name, uploaded.getvalue())})
        if data:
            st.success(f"Document processed ({data.get('chunks', 0)} chunks stored)")
    query = st.text_input("Ask about your document", key="rag_query")
    if st.button("Ask", key="rag_ask") and query.strip():
        with st.spinner("Searching..."):
            data = _post("/rag/query", json={"query": query})
        if data:
            st.markdown(data.get("response", ""))

with tools_tab:
    tools_prompt = st.text_input("Try: What is 12 * 7? or What's the weather in Paris?", key="tools_prompt")
    if st.button("Run", key="tools_run") and tools_prompt.strip():
        with st.spinner("Calling tools..."):
            data = _post("/tools", json={"prompt": tools_prompt})
        if data:
            st.markdown(data.get("response", ""))
            for call in data.get("toolCalls", []):
                with st.expander(f"Tool: {call.get('name', '')}"):
                    st.code(json.dumps(call.get("arguments", {}), indent=2), language="json")
                    st.text(call.get("result", ""))

with agent_tab:
    task = st.text_area("Task", placeholder="Plan a trip", key="agent_task")
    if st.button("Execute", key="agent_run") and task.strip():
        with st.spinner("Planning and executing..."):
            data = _post("/agent", json={"task": task})
        if data:
            for i, step in enumerate(data.get("steps", []), 1):
                st.subheader(f"Step {i}")
                st.caption(f"{step.get('action', '')} ({step.get('status', '')})")
                st.markdown(step.get("result", ""))
            st.divider()
            st.subheader("Result")
            st.markdown(data.get("result", ""))
