## storyboarder/main_app.py
# streamlit run storyboarder/main_app.py

import io
import os
import zipfile

import streamlit as st

from storyboarder.analysis import analyze_theme, analyze_visual_style
from storyboarder.config import AppSettings
from storyboarder.errors import StoryboardError
from storyboarder.export_utils import make_grid_image, make_pdf_bytes, panel_image_path, project_from_json, project_to_json
from storyboarder.logging_config import setup_logging
from storyboarder.models import ArchitecturalProjectKind, IssueType, PDFLayout, ProjectType
from storyboarder.parsing import parse_architectural_input, parse_user_input
from storyboarder.projects import (
    append_architectural_panels_from_input,
    append_panels_from_input,
    edit_panel_prompt,
    regenerate_panel_prompt,
    remove_character,
)
from storyboarder.prompting import character_consistency_prompt
from storyboarder.validation import validate_storyboard_project

st.set_page_config(page_title="🎬 Storyboarder", page_icon="🎨", layout="wide")

settings = AppSettings.from_env()
if "logging_ready" not in st.session_state:
    setup_logging(settings.log_level)
    st.session_state.logging_ready = True

st.title("🎬 Storyboarder")
st.caption("Turn a short idea into a panel-by-panel storyboard with ready-to-render prompts.")

# ---------- Session state ----------
if "project" not in st.session_state:
    st.session_state.project = None
if "messages" not in st.session_state:
    st.session_state.messages = []

# ---------- Sidebar Controls ----------
with st.sidebar:
    st.header("Input")
    mode = st.radio("Project type", ["Storyboard", "Architectural"], horizontal=True)
    kind = None
    if mode == "Architectural":
        kinds = [k.value for k in ArchitecturalProjectKind]
        kind = st.selectbox("Drawing set", kinds, index=kinds.index(settings.default_kind) if settings.default_kind in kinds else 0)
        default_text = "Show a reinforced concrete beam detail, scale 1:20, 3 panels"
    else:
        default_text = "A guy with a dog walking in the park in the morning. They find a ball. They play happily. (panels: 4)"
    text = st.text_area("Describe your idea", default_text, height=140)
    parse_btn = st.button("✏️ Create storyboard", use_container_width=True)

    st.header("Open")
    uploaded = st.file_uploader("Project JSON", type=["json"])
    if uploaded is not None and st.button("📂 Load project", use_container_width=True):
        try:
            st.session_state.project = project_from_json(uploaded.getvalue())
            st.session_state.messages = []
        except StoryboardError as e:
            st.error(str(e))

if parse_btn:
    result = parse_architectural_input(text, kind) if mode == "Architectural" else parse_user_input(text)
    if result.success:
        st.session_state.project = result.project
        st.session_state.messages = result.warnings
    else:
        st.session_state.project = None
        st.error("; ".join(result.errors))

project = st.session_state.project
for msg in st.session_state.messages:
    st.warning(msg)

if project is None:
    st.info("Describe an idea in the sidebar to create a storyboard.")
    st.stop()

# ---------- Tabs ----------
T1, T2, T3 = st.tabs(["Storyboard", "Validation", "Export"])

with T1:
    st.subheader(project.title)
    meta_cols = st.columns(4)
    meta_cols[0].metric("Panels", len(project.panels))
    meta_cols[1].metric("Style", project.style.value.replace("_", " "))
    meta_cols[2].metric("Audience", project.metadata.target_audience.value)
    meta_cols[3].metric("Genre", project.metadata.genre or "-")

    with st.expander("Input analysis"):
        theme = analyze_theme(project.user_input)
        style = analyze_visual_style(project.user_input)
        st.write({"theme": theme.type.value, "concepts": theme.concepts, "main subject": theme.main_subject})
        st.write({"visual style": style.style.value, "characteristics": style.characteristics})
        if project.architectural_metadata:
            st.json(project.architectural_metadata.model_dump(mode="json"), expanded=False)

    if project.characters:
        st.write("**Characters**")
        char_cols = st.columns(min(len(project.characters), 4))
        for i, character in enumerate(list(project.characters)):
            with char_cols[i % len(char_cols)]:
                st.caption(f"{character.name} ({character.role.value})")
                st.write(character.description)
                st.caption(character_consistency_prompt(character))
                if st.button("🗑 Remove", key=f"rm_{character.id}"):
                    remove_character(project, character.id)
                    st.rerun()

    st.divider()
    if st.button("🎨 Render all panels", use_container_width=True):
        try:
            from storyboarder.pipeline import get_backend_info, render_panels
        except ImportError:
            st.error("Image rendering needs the optional render dependencies: pip install 'storyboarder[render]'")
        else:
            with st.spinner(f"Rendering {len(project.panels)} panels..."):
                try:
                    render_panels(project, settings)
                    st.success("✅ Rendering complete!")
                    st.caption(f"Backend: {get_backend_info(settings.model_candidates)}")
                except StoryboardError as e:
                    st.error(f"Rendering failed: {e}")

    cols = st.columns(2)
    for i, panel in enumerate(project.panels):
        with cols[i % 2]:
            st.markdown(f"**Panel {panel.panel_number}** · {panel.prompt.panel_type.value.replace('_', ' ')}"
                        f"{' · edited' if panel.is_edited else ''}")
            image = panel_image_path(panel)
            if image:
                st.image(image, use_container_width=True)
            scene = project.find_scene(panel.prompt.scene_id)
            st.caption(f"{scene.location} · {panel.prompt.scene_description}" if scene else panel.prompt.scene_description)
            key = f"prompt_{panel.id}"
            if key not in st.session_state:
                st.session_state[key] = panel.prompt.generated_prompt
            edited = st.text_area("Prompt", key=key, height=160)
            b1, b2 = st.columns(2)
            if b1.button("💾 Save", key=f"save_{panel.id}"):
                edit_panel_prompt(project, panel.panel_number, generated_prompt=edited)
                st.rerun()
            if b2.button("♻️ Regenerate", key=f"regen_{panel.id}"):
                regenerate_panel_prompt(project, panel.panel_number)
                st.session_state.pop(key, None)
                st.rerun()

    st.divider()
    st.write("**Continue the story**")
    more = st.text_input("Add panels from more text", "")
    if st.button("➕ Append panels") and more.strip():
        try:
            if project.project_type == ProjectType.ARCHITECTURAL:
                append_architectural_panels_from_input(project, more)
            else:
                append_panels_from_input(project, more)
            st.rerun()
        except StoryboardError as e:
            st.error(str(e))

with T2:
    st.subheader("Validation")
    contextual = st.checkbox("Score theme and style coherence", value=True)
    report = validate_storyboard_project(project, contextual=contextual)
    c1, c2 = st.columns(2)
    c1.metric("Score", f"{report.score}/100")
    c2.metric("Valid", "yes" if report.is_valid else "no")
    icons = {IssueType.ERROR: "❌", IssueType.WARNING: "⚠️", IssueType.SUGGESTION: "💡"}
    for issue in report.issues:
        where = f"Panel {issue.panel_number}: " if issue.panel_number else ""
        st.write(f"{icons[issue.type]} {where}{issue.message}")
    for tip in report.suggestions:
        st.caption(tip)

with T3:
    st.subheader("Exports")
    st.download_button(
        "📦 Export Project JSON",
        data=project_to_json(project),
        file_name="storyboard.json",
        mime="application/json",
        use_container_width=True,
    )

    layout = st.selectbox("PDF layout", [l.value for l in PDFLayout], index=1)
    include_metadata = st.checkbox("Include prompts in PDF", value=True)
    try:
        pdf_bytes = make_pdf_bytes(project, layout=PDFLayout(layout), include_metadata=include_metadata)
        st.download_button(
            "📄 Download PDF",
            data=pdf_bytes,
            file_name="storyboard.pdf",
            mime="application/pdf",
            use_container_width=True,
        )
    except StoryboardError as e:
        st.error(str(e))

    paths = [p for p in (panel_image_path(panel) for panel in project.panels) if p]
    if paths:
        st.image(make_grid_image(paths, columns=3), caption="Rendered panels", use_container_width=True)
        zip_buffer = io.BytesIO()
        with zipfile.ZipFile(zip_buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for p in paths:
                zf.write(p, os.path.basename(p))
        zip_buffer.seek(0)
        st.download_button(
            "⬇️ Download All Panels (ZIP)",
            data=zip_buffer,
            file_name="storyboard_panels.zip",
            mime="application/zip",
            use_container_width=True,
        )
