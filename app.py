# app.py - Operator console: generate articles, seed the idea pool, plan templates

import json
import random
from pathlib import Path

import markdown
import streamlit as st

from articlegen.config import Settings, configure_logging
from articlegen.content_guidelines import LEAD_STYLES, SUPPORTED_LANGUAGES
from articlegen.errors import ArticleGenError, UpstreamError
from articlegen.generator import ArticleGenerator
from articlegen.idea_store import IdeaStore
from articlegen.llm import StructuredClient
from articlegen.models import GenerationRequest
from articlegen.references import JsonlReferenceLookup
from articlegen.seeding import IdeaSeeder
from articlegen.template_plan import plan_template

# -----------------------------------------------------------------------------
# Settings & shared objects
# -----------------------------------------------------------------------------
@st.cache_resource
def _runtime():
    settings = Settings.from_env()
    configure_logging(settings)
    return settings, StructuredClient(settings)


st.set_page_config(page_title="Article Generator", layout="wide")
settings, client = _runtime()

st.title("📝 Article Generator")

ss = st.session_state
ss.setdefault("article", None)
ss.setdefault("plan", None)


def article_markdown(article) -> str:
    parts = [f"# {article.title}", "", f"_{article.summary}_", "", article.body_markdown.strip()]
    if article.faq:
        parts += ["", "## FAQ"]
        for item in article.faq:
            parts += ["", f"**{item.q}**", "", item.a]
    if article.references:
        parts += ["", "## References"]
        parts += [f"- [{r.title or 'PMID ' + r.pmid}]({r.url})" for r in article.references]
    return "\n".join(parts) + "\n"


tab_gen, tab_ideas, tab_plan = st.tabs(["✍️ Generate", "💡 Idea pool", "🎨 Template plan"])

# ---------------- Generate ----------------
with tab_gen:
    with st.form("generate"):
        c1, c2, c3 = st.columns([1, 3, 3])
        lang = c1.selectbox("Language", SUPPORTED_LANGUAGES)
        subject = c2.text_input("Subject")
        keywords_txt = c3.text_input("Keywords (comma separated)")

        c4, c5, c6, c7 = st.columns(4)
        paragraphs = c4.number_input("Paragraphs", 1, 40, 9)
        faq_count = c5.number_input("FAQ items", 0, 30, 8)
        policy = c6.selectbox("PMID policy", ["auto", "none", "limited"])
        lead = c7.selectbox("Lead style", ["(random)", *LEAD_STYLES])

        refs_path = st.text_input("References file (JSONL)", "data/references.jsonl")
        special = st.text_area("Special requirements", height=80)
        submitted = st.form_submit_button("Generate", type="primary")

    if submitted:
        try:
            req = GenerationRequest.from_payload({
                "lang": lang,
                "subject": subject,
                "keywords": keywords_txt.split(","),
                "paragraphs": int(paragraphs),
                "faqCount": int(faq_count),
                "pmidPolicy": policy,
                "leadStyle": None if lead == "(random)" else lead,
                "specialRequirements": special,
            })
            refs = []
            if refs_path.strip() and Path(refs_path).exists():
                refs = JsonlReferenceLookup(Path(refs_path)).lookup(req.lang, req.keywords, settings.reference_limit)
            with st.spinner("Generating..."):
                ss["article"] = ArticleGenerator(client, settings).generate(req, refs)
        except ArticleGenError as e:
            st.error(str(e))

    article = ss["article"]
    if article is not None:
        md_text = article_markdown(article)
        if not article.accepted:
            st.warning(f"Returned after {article.attempts} attempts without passing every check.")
        st.caption(f"lead={article.lead_style} · citations={article.citation_mode} · slug={article.slug}")

        tab_preview, tab_code = st.tabs(["👁️ Preview", "📝 Markdown"])
        with tab_preview:
            st.markdown(md_text)
        with tab_code:
            st.code(md_text, language="markdown")

        fmt = st.selectbox("Format", ["Markdown", "HTML"])
        if fmt == "HTML":
            data, ext = markdown.markdown(md_text, extensions=["extra"]).encode("utf-8"), ".html"
        else:
            data, ext = md_text.encode("utf-8"), ".md"
        st.download_button("📥 Export", data=data, file_name=f"{article.slug}{ext}")

# ---------------- Idea pool ----------------
with tab_ideas:
    c1, c2, c3 = st.columns([1, 1, 1])
    ideas_lang = c1.selectbox("Language", SUPPORTED_LANGUAGES, key="ideas_lang")
    target = c2.number_input("Target size", 1, settings.idea_pool_cap, 100)
    batch = c3.number_input("Batch size", 10, 200, 40)
    seeds_txt = st.text_input("Seed topics (comma separated)", settings.site_topic)

    if st.button("Seed pool", type="primary"):
        seeder = IdeaSeeder(client, settings)
        try:
            with st.spinner("Seeding..."):
                result = seeder.seed(ideas_lang, int(target), int(batch), seeds_txt.split(","))
            st.success(f"✅ {result.count} ideas ({result.added} new, {result.stop_reason})")
        except UpstreamError as e:
            added = e.progress.added if e.progress else 0
            st.error(f"{e} (added {added} before the failure)")
        except ArticleGenError as e:
            st.error(str(e))

    store = IdeaStore(ideas_lang, settings.cache_dir, cap=settings.idea_pool_cap,
                      lock_timeout=settings.store_lock_timeout)
    st.caption(f"{store.count()} ideas stored for {ideas_lang}")
    limit = st.slider("Show", 1, 200, 25)
    rows = [r.model_dump() for r in store.list(limit=limit)]
    if rows:
        st.dataframe(rows, use_container_width=True)

# ---------------- Template plan ----------------
with tab_plan:
    c1, c2 = st.columns([1, 3])
    plan_lang = c1.selectbox("Language", SUPPORTED_LANGUAGES, key="plan_lang")
    plan_seed = c2.text_input("Seed (blank = random)")
    flags_txt = st.text_input("Style flags (comma separated)")
    randomize = st.checkbox("Randomize flags when empty", value=True)

    if st.button("Plan template", type="primary"):
        try:
            with st.spinner("Planning..."):
                ss["plan"] = plan_template(
                    client, settings, plan_lang,
                    seed=plan_seed or None,
                    style_flags=flags_txt.split(","),
                    randomize=randomize,
                    rng=random.Random(),
                )
        except ArticleGenError as e:
            st.error(str(e))

    if ss["plan"]:
        st.json(ss["plan"])
        st.download_button("📥 Export", data=json.dumps(ss["plan"], indent=2, ensure_ascii=False),
                           file_name=f"{ss['plan']['seed']}.json")
