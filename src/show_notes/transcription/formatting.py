"""Render provider transcription results as plain text with ``[MM:SS]`` timestamps."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Sequence

DEEPGRAM_WORDS_PER_BLOCK = 30
ASSEMBLY_LINE_CHARS = 80
NO_TRANSCRIPT_TEXT = "No transcription available."

_SENTENCE_END_RE = re.compile(r"[.!?]$")
_CAPITALIZED_RE = re.compile(r"^[A-Z]")


def format_timestamp(seconds: float) -> str:
    """Format a position in seconds as ``MM:SS`` (minutes are not wrapped into hours)."""
    total = int(max(seconds, 0))
    return f"{total // 60:02d}:{total % 60:02d}"


def format_whisper_segments(segments: Iterable[Mapping[str, Any]]) -> str:
    """Render Whisper segments as one ``[MM:SS] text`` line per non-empty segment."""
    lines = []
    for segment in segments:
        text = str(segment.get("text") or "").strip()
        if not text:
            continue
        lines.append(f"[{format_timestamp(float(segment.get('start') or 0.0))}] {text}")
    return "\n".join(lines)


def format_deepgram_words(words: Sequence[Mapping[str, Any]]) -> str:
    """Render Deepgram words with timestamps at block and sentence starts.

    A timestamp precedes the first word of every 30-word block and every
    capitalized word. A line ends after sentence punctuation, after the last
    word of a 30-word block, and after the final word.
    """
    out: List[str] = []
    last_index = len(words) - 1
    for i, entry in enumerate(words):
        word = str(entry.get("punctuated_word") or entry.get("word") or "")
        if i % DEEPGRAM_WORDS_PER_BLOCK == 0 or _CAPITALIZED_RE.match(word):
            out.append(f"[{format_timestamp(float(entry.get('start') or 0.0))}] ")
        out.append(f"{word} ")
        end_of_block = i % DEEPGRAM_WORDS_PER_BLOCK == DEEPGRAM_WORDS_PER_BLOCK - 1
        if _SENTENCE_END_RE.search(word) or end_of_block or i == last_index:
            out.append("\n")
    return "".join(out)


def _ms_timestamp(milliseconds: float) -> str:
    return format_timestamp(float(milliseconds) / 1000.0)


def format_assembly_transcript(transcript: Dict[str, Any], speaker_labels: bool = True) -> str:
    """Render an AssemblyAI transcript.

    Utterances become ``Speaker X (MM:SS): text`` lines. Without utterances,
    words are grouped into roughly 80-character lines, each prefixed with the
    timestamp of its first word. Without either, the raw text is returned.
    """
    utterances = transcript.get("utterances") or []
    if utterances:
        lines = []
        for utt in utterances:
            speaker = f"Speaker {utt.get('speaker')} " if speaker_labels else ""
            start = _ms_timestamp(utt.get("start") or 0)
            lines.append(f"{speaker}({start}): {utt.get('text', '')}")
        return "\n".join(lines)

    words = transcript.get("words") or []
    if words:
        out = []
        line = ""
        stamp = _ms_timestamp(words[0].get("start") or 0)
        for word in words:
            text = str(word.get("text") or "")
            if len(line) + len(text) > ASSEMBLY_LINE_CHARS:
                out.append(f"[{stamp}] {line.strip()}\n")
                line = ""
                stamp = _ms_timestamp(word.get("start") or 0)
            line += f"{text} "
        if line:
            out.append(f"[{stamp}] {line.strip()}\n")
        return "".join(out)

    return str(transcript.get("text") or NO_TRANSCRIPT_TEXT)
