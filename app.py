import os
import logging

import streamlit as st
from dotenv import load_dotenv

from pipelines import PaperLatexPipeline, PaperLatexConfig
from pipelines.config import LLMConfig, DEFAULT_MODELS
from src.texcore.errors import PaperEntryError
from src.texcore.io import encode_document, is_pdf
from src.texcore.models import Phase, SessionSnapshot, Status


def create_pipeline(
    provider: str, api_key: str, model_name: str, max_papers: int
) -> PaperLatexPipeline:
    llm_cfg = LLMConfig(provider=provider, api_key=api_key, model_name=model_name)
    cfg = PaperLatexConfig(llm=llm_cfg, max_papers=max_papers, save_results=False)
    return PaperLatexPipeline(cfg)


STATUS_BADGES = {
    Status.PENDING: "⏳ Pending",
    Status.PROCESSING: "🔄 Processing",
    Status.SUCCESS: "✅ Done",
    Status.ERROR: "❌ Error",
}


def render_results(snapshot: SessionSnapshot, live: bool = False):
    total = len(snapshot.results)
    if total:
        st.progress(snapshot.done_count / total, text=f"{snapshot.done_count}/{total} papers")

    for res in snapshot.results:
        meta = res.metadata
        with st.container(border=True):
            head, badge = st.columns([5, 1])
            head.markdown(f"**Paper {meta.index}:** {meta.title}")
            badge.write(STATUS_BADGES[res.status])

            if res.status is Status.SUCCESS:
                # st.code carries its own copy-to-clipboard button
                st.code(res.content, language="latex")
                if not live:
                    st.download_button(
                        "Download .tex",
                        data=res.content,
                        file_name=f"paper_{meta.index}.tex",
                        mime="text/x-tex",
                        key=f"dl_{res.id}",
                    )
            elif res.status is Status.ERROR:
                st.error(res.error_message)
            elif res.status is Status.PROCESSING and live:
                st.caption("Extracting metadata...")


def reset_session():
    st.session_state["snapshot"] = None
    st.session_state["processed_file"] = None
    st.session_state["uploader_key"] = st.session_state.get("uploader_key", 0) + 1


load_dotenv()
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)

st.set_page_config(page_title="PDF to LaTeX Entries", page_icon="📄", layout="wide")

st.title("PDF to LaTeX Entries 📄")
st.caption(
    "Upload a PDF with one or more papers and get one \\paperentrynum block per paper"
)

st.session_state.setdefault("snapshot", None)
st.session_state.setdefault("processed_file", None)
st.session_state.setdefault("uploader_key", 0)

with st.sidebar:
    st.header("Configuration")
    provider = st.selectbox("Provider", ["gemini", "openrouter"], index=0)
    env_var = "GEMINI_API_KEY" if provider == "gemini" else "OPENROUTER_API_KEY"
    api_key = st.text_input(env_var, value=os.getenv(env_var, ""), type="password")
    model_name = st.text_input("Model", value=DEFAULT_MODELS[provider])
    max_papers = st.number_input(
        "Max papers", min_value=1, max_value=200, value=50, step=1
    )

snapshot = st.session_state["snapshot"]

if snapshot is None or snapshot.phase is Phase.IDLE:
    uploaded = st.file_uploader(
        "Drop a PDF here or click to browse",
        type=["pdf"],
        accept_multiple_files=False,
        key=f"uploader_{st.session_state['uploader_key']}",
    )

    if uploaded is not None and uploaded.file_id != st.session_state["processed_file"]:
        if not is_pdf(uploaded.type):
            st.error("Please upload a PDF file.")
            st.stop()

        effective_key = api_key or os.getenv(env_var, "")
        if not effective_key:
            st.error(f"Please provide {env_var} in the sidebar or .env")
            st.stop()

        try:
            pipeline = create_pipeline(provider, effective_key, model_name, int(max_papers))
            document = encode_document(
                uploaded.getvalue(),
                name=uploaded.name,
                mime_type=uploaded.type,
                max_bytes=pipeline.config.max_document_bytes,
            )
        except (PaperEntryError, ValueError) as e:
            st.error(str(e))
            st.stop()

        st.session_state["processed_file"] = uploaded.file_id
        live_view = st.empty()

        def show_progress(snap: SessionSnapshot):
            # kept so a rerun mid-session still has the partial results
            st.session_state["snapshot"] = snap
            with live_view.container():
                if snap.phase is Phase.ANALYZING:
                    st.info(
                        "🔎 Analyzing PDF structure... "
                        "Identifying papers in the uploaded file."
                    )
                elif snap.phase is Phase.PROCESSING:
                    render_results(snap, live=True)
                    st.caption("Processing next paper...")

        st.session_state["snapshot"] = pipeline(document, on_update=show_progress)
        st.rerun()

elif snapshot.phase in (Phase.ANALYZING, Phase.PROCESSING):
    # the script was rerun while the session was still running
    total = len(snapshot.results)
    if total:
        st.error(
            f"Conversion was interrupted after {snapshot.done_count}/{total} papers. "
            "Finished entries are kept below."
        )
        render_results(snapshot)
    else:
        st.error("Conversion was interrupted while analyzing the PDF.")
    st.divider()
    st.button("Start Over", type="primary", on_click=reset_session)

elif snapshot.phase is Phase.FAILED:
    st.subheader("Analysis Failed")
    st.error(snapshot.error_message)
    st.button("Try Another File", on_click=reset_session)

else:
    render_results(snapshot)
    st.divider()
    st.button("Convert Another PDF", type="primary", on_click=reset_session)
