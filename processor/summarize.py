"""
Condensing long extracted text down to its study-relevant parts.

Extracted documents above ``MAX_CHARS`` are first cleaned (page numbers,
dates, links and other layout noise removed, navigation lines dropped). If
that is not enough, sentences are ranked by how much teaching content they
carry and the best ones are kept up to ``TARGET_CHARS``.
"""

import logging
import re
from typing import List

logger = logging.getLogger(__name__)

MAX_CHARS = 15000
TARGET_CHARS = 12000
TRUNCATION_MARKER = "... [Content truncated due to length]"

EDUCATIONAL_KEYWORDS = (
    'definition', 'concept', 'formula', 'equation', 'theory', 'principle',
    'density', 'pressure', 'volume', 'mass', 'force', 'area', 'height',
    'calculate', 'solve', 'example', 'problem', 'solution', 'answer',
    'explain', 'describe', 'analyze', 'compare', 'contrast', 'identify',
    'properties', 'characteristics', 'features', 'types', 'kinds',
    'measurement', 'units', 'conversion', 'factor', 'ratio', 'proportion',
    'graph', 'chart', 'diagram', 'figure', 'illustration',
    'experiment', 'observation', 'hypothesis', 'conclusion', 'result',
)

NON_EDUCATIONAL_PATTERNS = [
    re.compile(r'^[A-Z\s]+$'),
    re.compile(r'^(Home|Menu|Back|Next|Previous|Close|Open|Save|Print|Download)', re.IGNORECASE),
    re.compile(r'^(Page|Slide|Chapter|Section)\s*\d+', re.IGNORECASE),
    re.compile(r'^(Copyright|©|All rights reserved)', re.IGNORECASE),
    re.compile(r'^(Created|Modified|Updated|Last updated)', re.IGNORECASE),
    re.compile(r'^(File|Edit|View|Insert|Format|Tools|Help)', re.IGNORECASE),
    re.compile(r'^(Click|Press|Select|Choose|Enter|Type)', re.IGNORECASE),
    re.compile(r'^(Navigation|Menu|Toolbar|Sidebar|Footer|Header)', re.IGNORECASE),
    re.compile(r'^[^\w\s]*$'),
    re.compile(r'^\d+$'),
    re.compile(r'^(The|A|An|This|That|These|Those)\s*$'),
    re.compile(r'^(and|or|but|so|yet|for|nor)\s*$', re.IGNORECASE),
]

# (pattern, replacement) applied in order before line filtering
_NOISE = [
    (re.compile(r'Page \d+', re.IGNORECASE), ''),
    (re.compile(r'\d{1,2}/\d{1,2}/\d{2,4}'), ''),
    (re.compile(r'\b\d{1,2}:\d{2}\b'), ''),
    (re.compile(r'https?://\S+'), ''),
    (re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'), ''),
    (re.compile(r'\b\d{3}-\d{3}-\d{4}\b'), ''),
    (re.compile(r'\b[A-Z]{2,}\s+\d+\b'), ''),
    (re.compile(r'[ \t\f\v]+'), ' '),
    (re.compile(r'\n\s*\n'), '\n'),
]

# (keywords, weight); a sentence earns the weight if it contains any keyword
SENTENCE_WEIGHTS = [
    (('definition', 'define'), 10),
    (('formula', 'equation'), 10),
    (('example', 'for instance'), 8),
    (('calculate', 'solve'), 8),
    (('density', 'pressure'), 15),
    (('volume', 'mass'), 8),
    (('force', 'area'), 8),
    (('properties', 'characteristics'), 5),
    (('types', 'kinds'), 5),
    (('measurement', 'units'), 5),
    (('experiment', 'observation'), 6),
    (('click', 'press'), -5),
    (('page', 'slide'), -3),
    (('menu', 'navigation'), -5),
]

_SENTENCE_SPLIT = re.compile(r'[.!?]+')


def is_educational(text: str) -> bool:
    lower = text.lower()
    return any(keyword in lower for keyword in EDUCATIONAL_KEYWORDS)


def is_non_educational(text: str) -> bool:
    return any(pattern.search(text) for pattern in NON_EDUCATIONAL_PATTERNS)


def clean_and_filter(text: str) -> str:
    """Strip layout noise and drop lines that carry no teaching content."""
    cleaned = text
    for pattern, replacement in _NOISE:
        cleaned = pattern.sub(replacement, cleaned)
    cleaned = cleaned.strip()

    kept: List[str] = []
    for line in cleaned.split('\n'):
        line = line.strip()
        if len(line) < 10:
            continue
        if is_educational(line) or not is_non_educational(line):
            kept.append(line)
    return '\n'.join(kept)


def score_sentence(sentence: str) -> int:
    lower = sentence.lower()
    score = 0
    for keywords, weight in SENTENCE_WEIGHTS:
        if any(keyword in lower for keyword in keywords):
            score += weight
    if len(lower) < 20:
        score -= 3
    if len(lower) > 200:
        score -= 2
    return max(0, score)


def intelligent_summarization(text: str, target_length: int = TARGET_CHARS) -> str:
    """Keep the highest scoring sentences until ``target_length`` is reached."""
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text) if len(s.strip()) > 15]
    ranked = sorted(sentences, key=score_sentence, reverse=True)

    result = ''
    for sentence in ranked:
        if len(result) + len(sentence) > target_length:
            break
        result += sentence + '. '
    return result.strip()


def summarize_text(text: str) -> str:
    """Return ``text`` unchanged when short, otherwise a condensed version."""
    if len(text) < MAX_CHARS:
        return text

    logger.info(f"Text too long, summarizing. Original length: {len(text)}")
    try:
        condensed = clean_and_filter(text)
        if len(condensed) > MAX_CHARS:
            condensed = intelligent_summarization(condensed)
    except re.error as e:
        logger.error(f"Text summarization error: {e}", exc_info=True)
        return text[:MAX_CHARS] + TRUNCATION_MARKER

    logger.info(f"Summarized text length: {len(condensed)}")
    return condensed.strip()
