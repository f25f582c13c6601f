import json

import httpx
import pytest

from compactor.config import SplitConfig, SummarizerConfig
from compactor.errors import FileReadError, SummarizationError
from compactor.operations import build_output, compact_file
from compactor.summarizer import SummarizerClient


def _sse_summary(text: str) -> str:
    events = [
        {
            "type": "message_start",
            "message": {
                "id": "msg_1",
                "type": "message",
                "role": "assistant",
                "content": [],
                "model": "test-model",
                "stop_reason": None,
                "stop_sequence": None,
                "usage": {"input_tokens": 1, "output_tokens": 1},
            },
        },
        {"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}},
        {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": text}},
        {"type": "content_block_stop", "index": 0},
        {"type": "message_delta", "delta": {"stop_reason": "end_turn", "stop_sequence": None}, "usage": {"output_tokens": 1}},
        {"type": "message_stop"},
    ]
    return "".join(f"event: {event['type']}\ndata: {json.dumps(event)}\n\n" for event in events)


def _summarizer_config() -> SummarizerConfig:
    return SummarizerConfig(base_url="http://example", api_key="k", model="test-model")


def _client(handler) -> SummarizerClient:
    http_client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://example")
    return SummarizerClient(_summarizer_config(), http_client=http_client)


def test_build_output_layout():
    assert build_output("S", ["a\n", "b"]) == (
        "S\n\n-- End of conversation summary --\n-- Raw conversation starts below --\n\na\nb"
    )


def test_build_output_empty_tail():
    assert build_output("S", []).endswith("-- Raw conversation starts below --\n\n")


def test_compact_file_end_to_end(tmp_path):
    source = tmp_path / "chat.txt"
    source.write_text("".join(f"line {idx}\n" for idx in range(1, 11)), encoding="utf-8")
    output = tmp_path / "out.txt"
    sent = {}

    def handler(request: httpx.Request) -> httpx.Response:
        sent["content"] = json.loads(request.content)["messages"][0]["content"]
        return httpx.Response(200, text=_sse_summary("Summary of lines 1-6."))

    progress: list[str] = []
    summary = compact_file(
        str(source),
        SplitConfig(split_percent=50, overlap_lines=1),
        _summarizer_config(),
        output_file=str(output),
        on_text=progress.append,
        client=_client(handler),
    )

    assert "line 6\n" in sent["content"]
    assert "line 7\n" not in sent["content"]
    assert progress == ["Summary of lines 1-6."]
    assert summary.output_path == str(output)
    assert summary.split.part1_end == 6
    assert summary.split.part2_start == 5
    assert summary.split.overlap == 1
    written = output.read_text(encoding="utf-8")
    assert written == (
        "Summary of lines 1-6.\n\n-- End of conversation summary --\n-- Raw conversation starts below --\n\n"
        + "".join(f"line {idx}\n" for idx in range(6, 11))
    )
    assert summary.output_chars == len(written)
    assert summary.to_dict()["split"]["total_lines"] == 10


def test_compact_file_generates_output_name(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "chat.txt").write_text("a\nb\n", encoding="utf-8")

    summary = compact_file(
        "chat.txt",
        SplitConfig(),
        _summarizer_config(),
        client=_client(lambda _: httpx.Response(200, text=_sse_summary("sum"))),
    )

    assert summary.output_path.startswith("claude-compactor-")
    assert (tmp_path / summary.output_path).read_text(encoding="utf-8").startswith("sum\n\n")


def test_compact_file_missing_input(tmp_path):
    with pytest.raises(FileReadError):
        compact_file(
            str(tmp_path / "missing.txt"),
            SplitConfig(),
            _summarizer_config(),
            output_file=str(tmp_path / "out.txt"),
            client=_client(lambda _: httpx.Response(200, text=_sse_summary("unused"))),
        )


def test_compact_file_summarization_failure_writes_nothing(tmp_path):
    source = tmp_path / "chat.txt"
    source.write_text("a\nb\nc\n", encoding="utf-8")
    output = tmp_path / "out.txt"

    with pytest.raises(SummarizationError):
        compact_file(
            str(source),
            SplitConfig(),
            _summarizer_config(),
            output_file=str(output),
            client=_client(lambda _: httpx.Response(500, text="boom")),
        )
    assert not output.exists()
