"""
Prompt construction for structured resume extraction.
Pure and deterministic: the same text always yields the same prompt.
"""

SYSTEM_INSTRUCTION = (
    "You are an expert resume parsing assistant. "
    "Your response MUST be a single, valid JSON object and nothing else."
)

OUTPUT_SCHEMA = """{
  "full_name": "string",
  "email": "string",
  "phone": "string",
  "location": "string",
  "skills": ["string"],
  "experience": [
    {
      "title": "string",
      "company": "string",
      "duration": "string",
      "description": "string"
    }
  ],
  "education": [
    {
      "degree": "string",
      "institution": "string",
      "year": "string"
    }
  ]
}"""

PROMPT_TEMPLATE = """Analyze this resume and extract the following information in valid JSON format only. Do not include any explanation or additional text.

{schema}

If a field is not found, use null for strings or an empty array for lists.

Resume content:
{text}"""


def build_prompt(text: str) -> str:
    """Build the single-turn extraction prompt for ``text``.

    The text is embedded verbatim; callers are expected to pass output of
    the text extractor, which is already length-bounded.
    """
    return PROMPT_TEMPLATE.format(schema=OUTPUT_SCHEMA, text=text)
