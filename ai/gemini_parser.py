"""
ai/gemini_parser.py
-------------------
Uses Google Gemini 2.5 Flash to turn a free-text hiring note into the
structured fields needed to create an employee record.

Responsibilities:
    - Understand notes like "Hire John Doe as IT_PROG, 5000/month, dept 10,
      john.doe@example.com, 1234567890, starting 2025-04-24".
    - Extract: names, email, phone, hire date, job id, salary, commission,
      manager id, department id.
    - Return a clean JSON dict ready for the Service layer.
"""

import json
from datetime import date

import google.generativeai as genai

from config import GEMINI_API_KEY
from utils.logger import get_logger

logger = get_logger(__name__)

# Configure the Gemini client once at module level
genai.configure(api_key=GEMINI_API_KEY)

_model = genai.GenerativeModel("gemini-2.5-flash")

# ── System prompt for the AI ─────────────────────────────

_SYSTEM_PROMPT = """You are an HR data-entry assistant. Your only task is to convert the
user's message describing a new hire into JSON describing the employee record.

Today's date: {today}

## Rules:

1. **first_name / last_name:** split the person's name; a single name is unclear.
2. **email:** the work email exactly as written.
3. **phone_number:** digits only (keep a leading + if present).
4. **hire_date:** YYYY-MM-DD. "today" or nothing mentioned -> today. "next monday" etc. -> compute it.
5. **job_id:** an uppercase job code. Known codes:
   AD_PRES, AD_VP, AD_ASST, FI_MGR, FI_ACCOUNT, AC_MGR, SA_MAN, SA_REP,
   PU_CLERK, ST_CLERK, IT_PROG, HR_REP, MK_MAN.
   Map titles: programmer/developer -> IT_PROG, sales rep -> SA_REP,
   accountant -> FI_ACCOUNT, stock clerk -> ST_CLERK.
6. **salary:** number, monthly.
7. **commission_pct:** number between 0 and 1 ("10%" -> 0.1), or null.
8. **manager_id / department_id:** integers, or null if not mentioned.

## Examples:
- "Hire John Doe as programmer, 5000, dept 10, john.doe@example.com, 1234567890" ->
  {{"first_name":"John","last_name":"Doe","email":"john.doe@example.com","phone_number":"1234567890","hire_date":"{today}","job_id":"IT_PROG","salary":5000,"commission_pct":null,"manager_id":null,"department_id":10}}
- "Mary Johnson joins sales as SA_REP on 2025-04-24 at 8000 + 20% commission, mary.johnson@example.com, 4445556666, department 20" ->
  {{"first_name":"Mary","last_name":"Johnson","email":"mary.johnson@example.com","phone_number":"4445556666","hire_date":"2025-04-24","job_id":"SA_REP","salary":8000,"commission_pct":0.2,"manager_id":null,"department_id":20}}

## Format:
Return JSON only, no explanation or markdown:
{{"first_name":"...","last_name":"...","email":"...","phone_number":"...","hire_date":"YYYY-MM-DD","job_id":"...","salary":<number>,"commission_pct":<number|null>,"manager_id":<int|null>,"department_id":<int|null>}}

If a required field (name, email, phone, job, salary) is missing: {{"error":"unclear","question":"<short question asking for the missing data>"}}
"""


def _strip_fences(raw: str) -> str:
    """Remove markdown code fences Gemini sometimes wraps around JSON."""
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.split("\n", 1)[1] if "\n" in raw else raw[3:]
    if raw.endswith("```"):
        raw = raw[:-3]
    return raw.strip()


def parse_employee(text: str) -> dict:
    """
    Send a free-text hiring note to Gemini and get structured employee data back.

    Args:
        text: The raw message, e.g. "Hire John Doe as IT_PROG, 5000, dept 10 ...".

    Returns:
        A dict with keys: first_name, last_name, email, phone_number,
        hire_date, job_id, salary, commission_pct, manager_id, department_id.
        OR a dict with keys: error, question (if the message is unclear or
        the model could not be reached).
    """
    prompt = _SYSTEM_PROMPT.format(today=date.today().isoformat())

    response = None
    try:
        response = _model.generate_content(
            [
                {"role": "user", "parts": [{"text": prompt}]},
                {"role": "user", "parts": [{"text": text}]},
            ],
            generation_config=genai.GenerationConfig(
                temperature=0.1,
                max_output_tokens=400,
            ),
        )

        result = json.loads(_strip_fences(response.text))
        logger.info(f"Gemini parsed employee: {result}")
        return result

    except json.JSONDecodeError:
        logger.warning(f"Gemini returned non-JSON: {response.text if response else ''}")
        return {"error": "parse_failed", "question": "I couldn't read that. Could you rephrase the hiring details?"}
    except Exception as e:
        logger.error(f"Gemini API error: {e}")
        return {"error": "api_error", "question": "Parsing failed. Please try again or use /add_employee."}
