"""Tests for prompt rendering."""

import uuid

import pytest

from jobtracker.generation.schemas import ContextBundle, CoverLetterLength, JobContext, Tone, UserContext
from jobtracker.prompts import (
    DEFAULT_FOCUS_AREAS,
    LENGTH_INSTRUCTIONS,
    PHONE_PLACEHOLDER,
    TONE_INSTRUCTIONS,
    build_cover_letter_prompt,
    build_email_prompt,
)


@pytest.fixture
def minimal_context():
    return ContextBundle(
        job=JobContext(id=uuid.uuid4(), title="Backend Engineer", company_name="Acme"),
        user=UserContext(name="Jo", email="jo@x.com"),
    )


@pytest.fixture
def full_context():
    return ContextBundle(
        job=JobContext(
            id=uuid.uuid4(),
            title="Full Stack Developer",
            company_name="Globex",
            url="https://globex.example/careers/7",
            location="Berlin",
            salary="70k EUR",
            notes="Contact: Priya Patel",
        ),
        user=UserContext(
            name="Jo",
            email="jo@x.com",
            title="Web Developer",
            skills=["React", "Django"],
            phone="+49 30 1234567",
            portfolio_url="https://jo.dev",
            default_signature="Jo | Web Developer",
        ),
        cv_text="Built a booking platform serving 40k users.",
    )


class TestEmailPrompt:
    def test_minimal_context_mentions_role_and_company(self, minimal_context):
        prompt = build_email_prompt(minimal_context, Tone.PROFESSIONAL)
        assert "Backend Engineer" in prompt
        assert "Acme" in prompt
        assert "CV Excerpt" not in prompt
        assert "Additional Context" not in prompt

    def test_missing_phone_uses_placeholder(self, minimal_context):
        prompt = build_email_prompt(minimal_context, Tone.PROFESSIONAL)
        assert PHONE_PLACEHOLDER in prompt

    def test_optional_fields_rendered(self, full_context):
        prompt = build_email_prompt(full_context, Tone.FRIENDLY, "Referred by Sam")
        assert "- Job URL: https://globex.example/careers/7" in prompt
        assert "- Location: Berlin" in prompt
        assert "- Portfolio: https://jo.dev" in prompt
        assert "- Skills: React, Django" in prompt
        assert "Additional Context: Referred by Sam" in prompt
        assert "+49 30 1234567" in prompt
        assert PHONE_PLACEHOLDER not in prompt

    def test_tone_label_and_instruction(self, minimal_context):
        prompt = build_email_prompt(minimal_context, Tone.ENTHUSIASTIC)
        assert "Tone: enthusiastic" in prompt
        assert TONE_INSTRUCTIONS[Tone.ENTHUSIASTIC] in prompt

    def test_asks_for_subject_format(self, minimal_context):
        prompt = build_email_prompt(minimal_context, Tone.PROFESSIONAL)
        assert prompt.rstrip().endswith("Subject: [subject line]\n\n[email body]")

    def test_sections_in_order(self, full_context):
        prompt = build_email_prompt(full_context, Tone.PROFESSIONAL, "Referred by Sam")
        order = [
            prompt.index("Job Details:"),
            prompt.index("Candidate Profile:"),
            prompt.index("CV Excerpt"),
            prompt.index("Additional Context:"),
            prompt.index("Tone:"),
            prompt.index("Best regards,"),
        ]
        assert order == sorted(order)

    def test_cv_excerpt_is_exact_1000_char_prefix(self, minimal_context):
        cv_text = "x" * 1000 + "Z" * 50
        context = minimal_context.model_copy(update={"cv_text": cv_text})
        prompt = build_email_prompt(context, Tone.PROFESSIONAL)
        assert cv_text[:1000] in prompt
        assert "x" * 1001 not in prompt
        assert "xZ" not in prompt

    def test_short_cv_included_whole(self, full_context):
        prompt = build_email_prompt(full_context, Tone.PROFESSIONAL)
        assert full_context.cv_text in prompt

    def test_braces_in_user_data_are_literal(self, minimal_context):
        context = minimal_context.model_copy(update={"cv_text": "Templates like {name} and {0}"})
        prompt = build_email_prompt(context, Tone.PROFESSIONAL)
        assert "Templates like {name} and {0}" in prompt


class TestCoverLetterPrompt:
    def test_empty_focus_areas_use_default(self, full_context):
        prompt = build_cover_letter_prompt(full_context, CoverLetterLength.MEDIUM, [])
        assert DEFAULT_FOCUS_AREAS in prompt
        assert "general experience" in prompt.lower()

    def test_focus_areas_numbered_in_order(self, full_context):
        prompt = build_cover_letter_prompt(full_context, CoverLetterLength.MEDIUM, ["Projects", "Leadership"])
        assert "1. Projects\n2. Leadership" in prompt
        assert DEFAULT_FOCUS_AREAS not in prompt

    def test_focus_areas_not_truncated(self, full_context):
        areas = ["A1", "B2", "C3", "D4"]
        prompt = build_cover_letter_prompt(full_context, CoverLetterLength.SHORT, areas)
        assert "4. D4" in prompt

    def test_full_cv_text_untruncated(self, full_context):
        long_cv = "y" * 3000
        context = full_context.model_copy(update={"cv_text": long_cv})
        prompt = build_cover_letter_prompt(context, CoverLetterLength.DETAILED, [])
        assert long_cv in prompt

    def test_notes_included_as_addressee_hint(self, full_context):
        prompt = build_cover_letter_prompt(full_context, CoverLetterLength.MEDIUM, [])
        assert "Contact: Priya Patel" in prompt

    @pytest.mark.parametrize("length", list(CoverLetterLength))
    def test_length_directive(self, full_context, length):
        prompt = build_cover_letter_prompt(full_context, length, [])
        assert LENGTH_INSTRUCTIONS[length] in prompt

    def test_emphasis_rules_always_present(self, minimal_context):
        prompt = build_cover_letter_prompt(minimal_context, CoverLetterLength.MEDIUM, [])
        for keyword in ("Full-stack", "SEO or WordPress", "Maintenance or support", "Branding or content", "years of experience"):
            assert keyword in prompt
