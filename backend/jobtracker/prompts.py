"""Prompt templates for outreach email and cover letter generation.

Rendering is pure: each builder takes a ContextBundle plus type-specific
options and returns one prompt string. Optional blocks collapse to nothing
when their data is missing.
"""

from .generation.schemas import ContextBundle, CoverLetterLength, JobContext, Tone, UserContext

EMAIL_CV_EXCERPT_CHARS = 1000
PHONE_PLACEHOLDER = "[Your Phone Number]"
DEFAULT_FOCUS_AREAS = "General experience and skills"

TONE_INSTRUCTIONS = {
    Tone.PROFESSIONAL: "Use a formal, professional tone. Be respectful and concise.",
    Tone.FRIENDLY: "Use a warm, approachable tone while maintaining professionalism.",
    Tone.ENTHUSIASTIC: "Use an energetic, passionate tone that shows genuine excitement about the opportunity.",
}

LENGTH_INSTRUCTIONS = {
    CoverLetterLength.SHORT: "Keep it to 1 page (approximately 250-300 words, 3 paragraphs)",
    CoverLetterLength.MEDIUM: "Write a standard cover letter (approximately 350-450 words, 4 paragraphs)",
    CoverLetterLength.DETAILED: "Write a comprehensive cover letter (approximately 500-600 words, 5 paragraphs)",
}

EMAIL_PROMPT = """You are a professional career advisor helping a job seeker write a short application email to a recruiter.

{job_block}

{user_block}
{cv_block}{context_block}
Tone: {tone_label} - {tone_instruction}

Write the email following these rules:
1. Keep it short and confident (120-180 words). No filler.
2. Name the role ({job_title}) and the company ({company_name}) in the first two sentences.
3. State that the CV and cover letter are attached.
4. Mention availability for an interview in the coming days.
5. Avoid cliches such as "I am writing to express my interest", "I believe I would be a great fit" or "passionate team player".
6. Do not invent experience that is not in the profile or CV.
7. End with exactly this signature block:

Best regards,
{signature_name}
{signature_phone}
{signature_email}{signature_portfolio}

Format the response exactly as:
Subject: [subject line]

[email body]"""

COVER_LETTER_PROMPT = """You are a senior career advisor writing a tailored cover letter for a job seeker.

{job_block}

{user_block}

CV Content:
{cv_text}

Focus Areas (prioritize these in the letter):
{focus_areas}

Length: {length_instruction}

Structure the letter in these 8 parts:
1. Subject line naming the role
2. Greeting: address the hiring manager by name if one appears in the job notes, otherwise "Dear Hiring Manager,"
3. Introduction: the role, the company and a one-sentence reason you fit
4. Relevant experience: the two or three most relevant roles or skills, tied to the job
5. Projects and results: concrete outcomes with numbers where the CV provides them
6. Motivation: why this company and this role specifically
7. Close: availability for an interview and thanks
8. Signature: "Sincerely," followed by the candidate's name and contact details

Tone rules:
- Confident but not arrogant.
- No cliches, no generic filler sentences.
- Never beg for the job or apologise for gaps.
- Do not copy CV bullet points verbatim; rephrase them as achievements.

Content emphasis rules (apply the ones matching the job title):
- Full-stack or software development roles: emphasise end-to-end delivery, frontend and backend stack, APIs and deployment.
- SEO or WordPress roles: emphasise site performance, search rankings, plugins and theme customisation, measurable traffic gains.
- Maintenance or support roles: emphasise reliability, troubleshooting, response times and long-term client relationships.
- Branding or content roles: emphasise visual identity, storytelling, content calendars and audience growth.
- If the job asks for a number of years of experience the candidate does not strictly meet, reposition the experience around depth, ownership and results instead of duration.

Output only the letter text, without commentary."""


def _job_block(job: JobContext, include_salary: bool, include_notes: bool) -> str:
    lines = [
        "Job Details:",
        f"- Company: {job.company_name}",
        f"- Position: {job.title}",
    ]
    if job.url:
        lines.append(f"- Job URL: {job.url}")
    if job.location:
        lines.append(f"- Location: {job.location}")
    if include_salary and job.salary:
        lines.append(f"- Salary: {job.salary}")
    if include_notes and job.notes:
        lines.append(f"- Job Notes (may contain the hiring manager's name): {job.notes}")
    return "\n".join(lines)


def _user_block(user: UserContext) -> str:
    lines = [
        "Candidate Profile:",
        f"- Name: {user.name}",
        f"- Email: {user.email}",
        f"- Phone: {user.phone or PHONE_PLACEHOLDER}",
    ]
    if user.portfolio_url:
        lines.append(f"- Portfolio: {user.portfolio_url}")
    if user.title:
        lines.append(f"- Current Title: {user.title}")
    if user.skills:
        lines.append(f"- Skills: {', '.join(user.skills)}")
    if user.default_signature:
        lines.append(f"- Preferred Signature: {user.default_signature}")
    return "\n".join(lines)


def build_email_prompt(
    context: ContextBundle,
    tone: Tone,
    additional_context: str | None = None,
) -> str:
    """Render the outreach email prompt.

    The CV excerpt is a hard cut at EMAIL_CV_EXCERPT_CHARS characters.
    """
    job, user = context.job, context.user

    cv_block = ""
    if context.cv_text:
        excerpt = context.cv_text[:EMAIL_CV_EXCERPT_CHARS]
        cv_block = f"\nCV Excerpt (extract the points relevant to this job):\n{excerpt}\n"

    context_block = ""
    if additional_context:
        context_block = f"\nAdditional Context: {additional_context}\n"

    return EMAIL_PROMPT.format(
        job_block=_job_block(job, include_salary=True, include_notes=False),
        user_block=_user_block(user),
        cv_block=cv_block,
        context_block=context_block,
        tone_label=tone.value,
        tone_instruction=TONE_INSTRUCTIONS[tone],
        job_title=job.title,
        company_name=job.company_name,
        signature_name=user.name,
        signature_phone=user.phone or PHONE_PLACEHOLDER,
        signature_email=user.email,
        signature_portfolio=f"\n{user.portfolio_url}" if user.portfolio_url else "",
    )


def build_cover_letter_prompt(
    context: ContextBundle,
    length: CoverLetterLength,
    focus_areas: list[str],
) -> str:
    """Render the cover letter prompt with the full CV text.

    Focus areas are echoed as given; capping them is the caller's job.
    """
    if focus_areas:
        focus = "\n".join(f"{i}. {area}" for i, area in enumerate(focus_areas, start=1))
    else:
        focus = DEFAULT_FOCUS_AREAS

    return COVER_LETTER_PROMPT.format(
        job_block=_job_block(context.job, include_salary=False, include_notes=True),
        user_block=_user_block(context.user),
        cv_text=context.cv_text,
        focus_areas=focus,
        length_instruction=LENGTH_INSTRUCTIONS[length],
    )
