"""
Texture Synth - Live Growth

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

import io
import time

import numpy as np
import streamlit as st
from PIL import Image

from texture_synth.color_utils import COLOR_SPACES, from_working_space, to_working_space
from texture_synth.config import SynthesisConfig
from texture_synth.exceptions import TextureSynthError
from texture_synth.image_io import compute_target_size, to_image
from texture_synth.synthesis import SynthesisSession

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="Texture Synth",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="collapsed",
)

_DEFAULTS = SynthesisConfig()
_PREVIEW_UPSCALE = 4

# -- CSS ---------------------------------------------------------------
st.markdown("""
<style>
    .stApp {
        background-color: #faf9f6;
        color: #2a2a2a;
        font-family: 'Inter', 'Helvetica Neue', sans-serif;
    }
    .block-container {
        max-width: 1000px;
        padding-top: 3.5rem;
        padding-bottom: 4rem;
    }
    .gallery-title {
        font-family: 'Cormorant Garamond', 'Georgia', serif;
        font-size: 2.8rem;
        font-weight: 300;
        text-align: center;
        border-bottom: 1px solid #1a1a1a;
        padding-bottom: 0.6rem;
        margin-bottom: 0.5rem;
    }
    .gallery-subtitle {
        font-size: 0.75rem;
        font-weight: 300;
        line-height: 1.8;
        margin-bottom: 3.5rem;
    }
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
    header {visibility: hidden;}
</style>
""", unsafe_allow_html=True)

# -- Title -------------------------------------------------------------
st.markdown(
    '<div class="gallery-title">Texture Synth</div>',
    unsafe_allow_html=True,
)
st.markdown(
    '<div class="gallery-subtitle">'
    "Upload a small patch of texture and watch it grow. Starting from a tiny "
    "random seed, every new pixel is copied from the place in your sample "
    "whose surroundings best match what has already been grown, one ring "
    "at a time (Efros–Leung non-parametric sampling). Larger windows "
    "capture larger structures but take longer to search."
    "</div>",
    unsafe_allow_html=True,
)

# -- Controls ----------------------------------------------------------
ctrl1, ctrl2, ctrl3 = st.columns(3)
with ctrl1:
    out_side = st.slider("Output size (px)", 8, 128, _DEFAULTS.output_rows)
with ctrl2:
    window = st.slider("Window", 3, 25, _DEFAULTS.window_size, step=2)
with ctrl3:
    max_side = st.slider("Sample max side (px)", 8, 96, 48)

color_space = st.selectbox("Colour space", COLOR_SPACES)
seed = st.number_input("Seed", value=_DEFAULTS.seed, step=1)

st.markdown("---")

# -- Upload ------------------------------------------------------------
uploaded = st.file_uploader(
    "Select texture sample", type=["jpg", "jpeg", "png", "webp", "bmp", "jfif"],
)

if uploaded is not None:
    original = Image.open(io.BytesIO(uploaded.getvalue())).convert("RGB")
    if max(original.width, original.height) > max_side:
        w, h = compute_target_size(original.width, original.height, max_side)
        original = original.resize((w, h), Image.LANCZOS)
    rgb = np.asarray(original, dtype=np.float64) / 255.0

    left, right = st.columns(2)
    with left:
        st.image(to_image(rgb, _PREVIEW_UPSCALE), caption="Sample")
    with right:
        preview = st.empty()
        status = st.empty()

    if st.button("Grow texture"):
        t0 = time.perf_counter()

        def _show(number: int, partial: np.ndarray) -> None:
            preview.image(
                to_image(from_working_space(partial, color_space), _PREVIEW_UPSCALE),
                caption=f"Pass {number}",
            )

        try:
            session = SynthesisSession(
                to_working_space(rgb, color_space),
                out_side, out_side, window, int(seed),
                on_pass=_show,
                **_DEFAULTS.synthesis_kwargs(),
            )
            texture = from_working_space(session.run(), color_space)
        except TextureSynthError as exc:
            status.error(str(exc))
        else:
            img = to_image(texture, _PREVIEW_UPSCALE)
            preview.image(img, caption="Synthesized")
            status.markdown(
                f"{session.passes} passes · mean error "
                f"{session.mean_error:.4f} · {time.perf_counter() - t0:.1f} s"
            )
            buf = io.BytesIO()
            to_image(texture).save(buf, format="PNG")
            st.download_button(
                "Download PNG", buf.getvalue(),
                file_name="texture.png", mime="image/png",
            )
