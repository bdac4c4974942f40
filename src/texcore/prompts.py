from __future__ import annotations

from .models import PaperMetadata
from .responses import SENTINEL

MACRO_NAME = "paperentrynum"


def build_analysis_prompt() -> str:
    return """This PDF contains one or more research papers.
Your task is to identify each distinct research paper in the file.

Return a STRICT valid JSON array of objects.
Each object must contain:
- "index": The 1-based sequential number of the paper as it appears in the file.
- "title": The extracted title of the paper.

If there is only one paper, return an array with one object.

Example JSON Output:
[
  {"index": 1, "title": "Deep Learning for Image Recognition"},
  {"index": 2, "title": "A Survey of Natural Language Processing"}
]

Return ONLY raw JSON. Do not use Markdown formatting (no ```json blocks)."""


def build_extraction_prompt(metadata: PaperMetadata) -> str:
    macro = "\\" + MACRO_NAME
    return f"""You are an expert LaTeX formatter.

CONTEXT:
The attached file is a PDF that may contain multiple papers.
Locate the paper number {metadata.index} titled roughly "{metadata.title}".

Your task is to convert this SPECIFIC research paper text into the following exact LaTeX block structure using my custom macro:

{macro}{{TITLE}}{{AUTHORS}}{{AFFILIATIONS}}{{ABSTRACT}}{{KEYWORDS}}

OUTPUT RULES (follow strictly):

1. Do NOT summarize. Use the text EXACTLY as provided.
2. Identify the paper's:
   - Title
   - Authors (comma-separated)
   - Affiliations (semicolon-separated, matching each author)
   - Abstract
   - Keywords
3. Put them inside:

{macro}
  {{TITLE}}
  {{Author 1, Author 2, ...}}
  {{Affiliation 1; Affiliation 2; ...}}
  {{Full abstract text without modification}}
  {{Keywords separated by semicolons}}

4. Do NOT add extra text, comments, explanations, or formatting.
5. Use LaTeX-safe characters:
   - Replace “ ” with `` ''
   - Replace – with --
   - Escape & as \\&
   - Escape % as \\%
   - Escape $ as \\$
6. Ensure no content spills outside the braces {{ }}.
7. Final output must ONLY contain the {macro} block, nothing else.
8. If the specific paper is not found or unreadable, return ONLY: "{SENTINEL}\""""
