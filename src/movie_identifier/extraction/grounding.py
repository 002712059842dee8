"""
Collects web sources the model cited via Google Search grounding.
"""
import logging
from typing import List, Optional

from ..schemas import Source
from ..transport.gemini_payload import Candidate

logger = logging.getLogger(__name__)


def collect_sources(candidate: Optional[Candidate]) -> List[Source]:
    """
    Build the ordered list of valid sources for a candidate.
    
    groundingAttributions are used when present; otherwise groundingChunks.
    Entries missing a uri or title are dropped.
    
    :param candidate: First response candidate (may be None)
    :return: Sources in the order the service returned them
    """
    if candidate is None or candidate.grounding_metadata is None:
        return []

    metadata = candidate.grounding_metadata
    entries = metadata.grounding_attributions or metadata.grounding_chunks

    sources = []
    for entry in entries:
        if entry.web is None:
            continue
        source = Source(uri=entry.web.uri or "", title=entry.web.title or "")
        if source.is_valid():
            sources.append(source)

    dropped = len(entries) - len(sources)
    if dropped:
        logger.debug(f"Dropped {dropped} grounding entr{'y' if dropped == 1 else 'ies'} without uri/title")

    return sources
