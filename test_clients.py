#!/usr/bin/env python3
"""
Tests for the Aliyun, DeepSeek and OpenAI chat clients.

Requests are captured through httpx.MockTransport; no network access.
"""

import asyncio
import inspect
import json

import httpx
import pytest

from candle_ai.config import Configuration
from candle_ai.llm import (
    AliyunClient,
    ChatOptions,
    DeepSeekClient,
    ModelFormat,
    ModelSpec,
    OHLCV,
    OHLCVParseError,
    OpenAIClient,
    StructuredAnalysis,
    TransportError,
    UnparsableResponseError,
    UnsupportedModelError,
    create_deepseek_client,
)
from candle_ai.llm.catalog.aliyun import DASHSCOPE_ENDPOINT
from candle_ai.llm.prompts import ANALYSIS_LANGUAGE_PROMPTS

HISTORY = [
    {"open": 100.0, "high": 105.0, "low": 98.0, "close": 103.0, "volume": 1500},
    {"open": 103.0, "high": 108.0, "low": 101.0, "close": 107.0, "volume": 1800},
]
PREDICTED = {"open": 107.0, "high": 110.0, "low": 105.0, "close": 109.0, "volume": 1700}


def chat_reply(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class Recorder:
    """MockTransport handler that records requests and replays a copy of one response."""

    def __init__(self, response: httpx.Response | None = None):
        self.response = response or httpx.Response(200, json=chat_reply("OK"))
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(
            self.response.status_code,
            headers=self.response.headers,
            content=self.response.content,
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last_url(self) -> str:
        return str(self.requests[-1].url)

    @property
    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


def sse_response(*deltas: str) -> httpx.Response:
    lines = [
        f"data: {json.dumps({'choices': [{'delta': {'content': text}}]})}\n"
        for text in deltas
    ]
    body = "".join(lines) + "data: [DONE]\n"
    return httpx.Response(
        200, content=body.encode(), headers={"Content-Type": "text/event-stream"}
    )


class TrackedStream(httpx.AsyncByteStream):
    """Response body that records how far it was read and whether it was closed."""

    def __init__(self, *parts: bytes, error: Exception | None = None, hold: bool = False):
        self.parts = parts
        self.error = error
        self.hold = asyncio.Event() if hold else None
        self.served = 0
        self.closed = False

    async def __aiter__(self):
        for part in self.parts:
            self.served += 1
            yield part
        if self.error is not None:
            raise self.error
        if self.hold is not None:
            await self.hold.wait()

    async def aclose(self) -> None:
        self.closed = True


def delta_line(text: str) -> bytes:
    return f"data: {json.dumps({'choices': [{'delta': {'content': text}}]})}\n".encode()


class TestClientSetup:
    """Construction and model management."""

    def test_empty_api_key(self):
        with pytest.raises(ValueError, match="API Key cannot be empty"):
            AliyunClient("")

    def test_unknown_model(self):
        with pytest.raises(UnsupportedModelError, match="Unsupported model type: gpt-9"):
            OpenAIClient("key", "gpt-9")

    def test_defaults(self):
        assert AliyunClient("key").model == "qwen-turbo"
        assert DeepSeekClient("key").model == "deepseek-chat"
        assert OpenAIClient("key").model == "gpt-3.5-turbo"

    def test_set_model(self):
        client = DeepSeekClient("key")
        client.set_model("deepseek-coder")
        assert client.current_model()["name"] == "deepseek-coder"
        with pytest.raises(UnsupportedModelError):
            client.set_model("gpt-4")
        assert client.model == "deepseek-coder"

    def test_factory(self):
        client = create_deepseek_client("key", "deepseek-math")
        assert isinstance(client, DeepSeekClient)
        assert client.model == "deepseek-math"

    def test_from_config(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "llm:\n"
            "  active: deepseek\n"
            "  providers:\n"
            "    deepseek:\n"
            "      model: deepseek-coder\n"
            "      base_url: https://deepseek.internal\n"
            "      timeout: 12\n"
            "streaming:\n"
            "  max_carry_chars: 4096\n"
        )
        monkeypatch.setenv("DEEPSEEK_API_KEY", "env-key")

        client = DeepSeekClient.from_config(Configuration(str(config_file)))

        assert client.model == "deepseek-coder"
        assert client.base_url == "https://deepseek.internal"
        assert client.timeout == 12
        assert client.decoder.max_carry_chars == 4096

    def test_from_config_reads_openai_organization(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "llm:\n"
            "  active: openai\n"
            "  providers:\n"
            "    openai:\n"
            "      model: gpt-4o\n"
            "      organization: org-42\n"
            "streaming:\n"
            "  max_carry_chars: null\n"
        )
        monkeypatch.setenv("OPENAI_API_KEY", "env-key")

        client = OpenAIClient.from_config(Configuration(str(config_file)))

        assert client.organization == "org-42"
        assert client.decoder.max_carry_chars is None


class TestChatRequests:
    """Request shapes per vendor."""

    @pytest.mark.asyncio
    async def test_aliyun_chat(self):
        recorder = Recorder(httpx.Response(200, json={"output": {"text": "legacy reply"}}))
        async with AliyunClient("key", http_transport=recorder.transport) as client:
            reply = await client.chat("Hi", ChatOptions(system_prompt="Be brief."))

        assert reply == "legacy reply"
        assert recorder.last_url == "https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions"
        assert recorder.requests[-1].headers["Authorization"] == "Bearer key"
        assert recorder.last_payload == {
            "model": "qwen-turbo",
            "messages": [
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "Hi"},
            ],
            "temperature": 0.7,
            "max_tokens": 1000,
            "stream": False,
        }

    @pytest.mark.asyncio
    async def test_deepseek_chat_adds_language_and_defaults(self):
        recorder = Recorder()
        async with DeepSeekClient("key", http_transport=recorder.transport) as client:
            assert await client.chat("Hi") == "OK"

        assert recorder.last_url == "https://api.deepseek.com/v1/chat/completions"
        payload = recorder.last_payload
        assert payload["messages"] == [
            {"role": "system", "content": "Please respond in English only."},
            {"role": "user", "content": "Hi"},
        ]
        assert payload["max_tokens"] == 2000
        assert payload["top_p"] == 1.0
        assert payload["frequency_penalty"] == 0.0
        assert payload["presence_penalty"] == 0.0

    @pytest.mark.asyncio
    async def test_deepseek_chinese_appends_to_system_prompt(self):
        recorder = Recorder()
        async with DeepSeekClient("key", http_transport=recorder.transport) as client:
            await client.chat("你好", ChatOptions(system_prompt="简短回答。"), language="cn")

        assert recorder.last_payload["messages"][0] == {
            "role": "system",
            "content": "简短回答。\n请使用中文回答。",
        }

    @pytest.mark.asyncio
    async def test_explicit_zero_temperature_is_sent(self):
        recorder = Recorder()
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            await client.chat_completion(
                [{"role": "user", "content": "Hi"}],
                temperature=0,
                top_p=0.9,
                stop=["\n"],
                tools=[{"type": "function", "function": {"name": "f"}}],
                tool_choice="auto",
            )

        payload = recorder.last_payload
        assert payload["temperature"] == 0
        assert payload["top_p"] == 0.9
        assert payload["stop"] == ["\n"]
        assert payload["tool_choice"] == "auto"
        assert "frequency_penalty" not in payload

    @pytest.mark.asyncio
    async def test_unknown_vendor_option_rejected(self):
        recorder = Recorder()
        async with AliyunClient("key", http_transport=recorder.transport) as client:
            with pytest.raises(TypeError, match="language"):
                await client.chat("Hi", language="en")
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_per_call_model_override(self):
        recorder = Recorder()
        async with AliyunClient("key", http_transport=recorder.transport) as client:
            await client.chat("Hi", ChatOptions(model="qwen-max"))
            with pytest.raises(UnsupportedModelError):
                await client.chat("Hi", ChatOptions(model="gpt-4"))

        assert recorder.last_payload["model"] == "qwen-max"
        assert client.model == "qwen-turbo"

    @pytest.mark.asyncio
    async def test_dashscope_format_model(self):
        legacy = ModelSpec(
            name="qwen-legacy",
            display_name="Qwen Legacy",
            endpoint=DASHSCOPE_ENDPOINT,
            format=ModelFormat.DASHSCOPE,
        )
        recorder = Recorder(httpx.Response(200, json={"output": {"text": "old api"}}))
        async with AliyunClient(
            "key", "qwen-legacy", models=[legacy], http_transport=recorder.transport
        ) as client:
            assert await client.chat("Hi", ChatOptions(temperature=0.2)) == "old api"

            with pytest.raises(UnsupportedModelError, match="only supports OpenAI format"):
                await client.chat_stream([{"role": "user", "content": "Hi"}], lambda t, f: None)

        assert recorder.last_url.endswith(DASHSCOPE_ENDPOINT)
        assert recorder.last_payload == {
            "model": "qwen-legacy",
            "input": {"messages": [{"role": "user", "content": "Hi"}]},
            "parameters": {"temperature": 0.2, "max_tokens": 1000, "result_format": "message"},
        }
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        recorder = Recorder(httpx.Response(500, json={"error": {"message": "boom"}}))
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            with pytest.raises(TransportError, match="HTTP 500: boom") as exc_info:
                await client.chat("Hi")
        assert exc_info.value.provider == "openai"
        assert exc_info.value.model == "gpt-3.5-turbo"


class TestStreaming:
    """chat_stream through the decoder."""

    @pytest.mark.asyncio
    async def test_stream_delivers_deltas_then_final(self):
        recorder = Recorder(sse_response("Hel", "lo", "!"))
        calls = []
        async with DeepSeekClient("key", http_transport=recorder.transport) as client:
            session = await client.chat_stream(
                [{"role": "user", "content": "Hi"}],
                lambda text, final: calls.append((text, final)),
                language="cn",
            )

        assert calls == [("Hel", False), ("lo", False), ("!", False), ("", True)]
        assert session.deltas == 3
        payload = recorder.last_payload
        assert payload["stream"] is True
        assert payload["messages"][0] == {"role": "system", "content": "请使用中文回答。"}
        assert recorder.requests[-1].headers["Accept"] == "text/event-stream"

    @pytest.mark.asyncio
    async def test_stream_with_async_callback(self):
        recorder = Recorder(sse_response("a", "b"))
        received = []

        async def on_delta(text, final):
            received.append(text)

        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            await client.chat_stream([{"role": "user", "content": "Hi"}], on_delta)

        assert "".join(received) == "ab"

    @pytest.mark.asyncio
    async def test_stream_http_error_makes_no_final_call(self):
        recorder = Recorder(httpx.Response(401, json={"error": {"message": "bad key"}}))
        calls = []
        async with AliyunClient("key", http_transport=recorder.transport) as client:
            with pytest.raises(TransportError, match="HTTP 401"):
                await client.chat_stream(
                    [{"role": "user", "content": "Hi"}],
                    lambda text, final: calls.append((text, final)),
                )
        assert calls == []


class TestStreamCleanup:
    """The response body is closed however the stream ends."""

    @staticmethod
    def client_for(stream: TrackedStream) -> OpenAIClient:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(
                200, headers={"Content-Type": "text/event-stream"}, stream=stream
            )
        )
        return OpenAIClient("key", http_transport=transport)

    @pytest.mark.asyncio
    async def test_closed_after_sentinel_with_pending_body(self):
        stream = TrackedStream(
            delta_line("done") + b"data: [DONE]\n",
            delta_line("never read"),
        )
        calls = []
        async with self.client_for(stream) as client:
            await client.chat_stream(
                [{"role": "user", "content": "Hi"}],
                lambda text, final: calls.append((text, final)),
            )

        assert calls == [("done", False), ("", True)]
        assert stream.served == 1
        assert stream.closed

    @pytest.mark.asyncio
    async def test_closed_after_read_failure(self):
        stream = TrackedStream(
            delta_line("partial"), error=httpx.ReadError("connection reset")
        )
        calls = []
        async with self.client_for(stream) as client:
            with pytest.raises(TransportError, match="Stream read failed") as exc_info:
                await client.chat_stream(
                    [{"role": "user", "content": "Hi"}],
                    lambda text, final: calls.append((text, final)),
                )

        assert calls == [("partial", False)]
        assert exc_info.value.provider == "openai"
        assert stream.closed

    @pytest.mark.asyncio
    async def test_closed_after_cancellation(self):
        stream = TrackedStream(delta_line("first"), hold=True)
        calls = []
        first_delta = asyncio.Event()

        def on_delta(text, final):
            calls.append((text, final))
            first_delta.set()

        async with self.client_for(stream) as client:
            task = asyncio.create_task(
                client.chat_stream([{"role": "user", "content": "Hi"}], on_delta)
            )
            await first_delta.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert calls == [("first", False)]
        assert stream.closed


class TestConnectionCheck:
    """test_connection reporting."""

    @pytest.mark.asyncio
    async def test_success(self):
        recorder = Recorder()
        async with AliyunClient("key", http_transport=recorder.transport) as client:
            result = await client.test_connection()
        assert result == {"success": True, "model": "qwen-turbo", "response": "OK"}
        assert "OK" in recorder.last_payload["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_failure(self):
        recorder = Recorder(httpx.Response(401, json={"error": {"message": "bad key"}}))
        async with DeepSeekClient("key", http_transport=recorder.transport) as client:
            result = await client.test_connection()
        assert result == {
            "success": False,
            "model": "deepseek-chat",
            "error": "HTTP 401: bad key",
        }


class TestPrediction:
    """predict_ohlcv."""

    @pytest.mark.asyncio
    async def test_predicts_requested_count(self):
        reply = json.dumps([PREDICTED, PREDICTED])
        recorder = Recorder(httpx.Response(200, json=chat_reply(reply)))
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            result = await client.predict_ohlcv(HISTORY, count=2)

        assert result == [OHLCV(**PREDICTED), OHLCV(**PREDICTED)]
        payload = recorder.last_payload
        assert payload["model"] == "gpt-3.5-turbo"
        assert payload["temperature"] == 0.3
        assert payload["max_tokens"] == 1000
        assert "Return EXACTLY 2 consecutive OHLCV objects" in payload["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_large_count_raises_token_budget(self):
        reply = json.dumps([PREDICTED] * 30)
        recorder = Recorder(httpx.Response(200, json=chat_reply(reply)))
        async with AliyunClient("key", http_transport=recorder.transport) as client:
            result = await client.predict_ohlcv(HISTORY, count=30)
        assert len(result) == 30
        assert recorder.last_payload["max_tokens"] == 30 * 50 + 100

    @pytest.mark.asyncio
    async def test_count_mismatch(self):
        recorder = Recorder(httpx.Response(200, json=chat_reply(json.dumps([PREDICTED]))))
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            with pytest.raises(OHLCVParseError, match="AI returned 1 OHLCV objects, but expected 2."):
                await client.predict_ohlcv(HISTORY, count=2)

    @pytest.mark.asyncio
    async def test_invalid_count_sends_nothing(self):
        recorder = Recorder()
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            with pytest.raises(ValueError, match="Count parameter too large"):
                await client.predict_ohlcv(HISTORY, count=51)
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_deepseek_uses_finance_model(self):
        recorder = Recorder(httpx.Response(200, json=chat_reply(json.dumps([PREDICTED]))))
        async with DeepSeekClient("key", http_transport=recorder.transport) as client:
            await client.predict_ohlcv(HISTORY, instructions="Predict tomorrow")
        payload = recorder.last_payload
        assert payload["model"] == "deepseek-finance"
        assert "Your task: Predict tomorrow" in payload["messages"][0]["content"]
        assert payload["messages"][0]["content"].endswith("Please respond in English only.")

    @pytest.mark.asyncio
    async def test_openai_analyze_is_prediction(self):
        recorder = Recorder(httpx.Response(200, json=chat_reply(json.dumps([PREDICTED]))))
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            result = await client.analyze_ohlcv(HISTORY)
        assert result == [OHLCV(**PREDICTED)]

    @pytest.mark.asyncio
    async def test_openai_analyze_forwards_arguments(self):
        reply = json.dumps([PREDICTED, PREDICTED])
        recorder = Recorder(httpx.Response(200, json=chat_reply(reply)))
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            result = await client.analyze_ohlcv(
                HISTORY,
                instructions="Predict the next session",
                count=2,
                options=ChatOptions(temperature=0.1),
            )
        assert len(result) == 2
        payload = recorder.last_payload
        assert payload["temperature"] == 0.1
        assert "Your task: Predict the next session" in payload["messages"][0]["content"]

    def test_openai_analyze_signature_matches_prediction(self):
        analyze = inspect.signature(OpenAIClient.analyze_ohlcv)
        predict = inspect.signature(OpenAIClient.predict_ohlcv)
        assert analyze.parameters.keys() == predict.parameters.keys()
        assert analyze.return_annotation == predict.return_annotation


class TestDeepSeekAnalysis:
    """analyze_ohlcv and analyze_ohlcv_structured."""

    @pytest.mark.asyncio
    async def test_free_text_analysis(self):
        recorder = Recorder(httpx.Response(200, json=chat_reply("趋势向上")))
        async with DeepSeekClient("key", http_transport=recorder.transport) as client:
            result = await client.analyze_ohlcv(HISTORY, language="cn", analysis_type="volume")

        assert result == "趋势向上"
        payload = recorder.last_payload
        assert payload["model"] == "deepseek-finance"
        assert payload["temperature"] == 0.5
        assert payload["max_tokens"] == 1500
        assert payload["messages"][0]["content"].endswith(
            ANALYSIS_LANGUAGE_PROMPTS["cn"] + "\n请使用中文回答。"
        )

    @pytest.mark.asyncio
    async def test_options_override_analysis_defaults(self):
        recorder = Recorder(httpx.Response(200, json=chat_reply("fine")))
        async with DeepSeekClient("key", http_transport=recorder.transport) as client:
            await client.analyze_ohlcv(
                HISTORY, options=ChatOptions(model="deepseek-chat", temperature=0.1)
            )
        assert recorder.last_payload["model"] == "deepseek-chat"
        assert recorder.last_payload["temperature"] == 0.1

    @pytest.mark.asyncio
    async def test_structured_analysis(self):
        reply = json.dumps({
            "summary": "Steady uptrend",
            "details": ["Higher closes"],
            "recommendations": ["Hold"],
        })
        recorder = Recorder(httpx.Response(200, json=chat_reply(reply)))
        async with DeepSeekClient("key", http_transport=recorder.transport) as client:
            result = await client.analyze_ohlcv_structured(HISTORY, message="Focus on risk")

        assert isinstance(result, StructuredAnalysis)
        assert result.summary == "Steady uptrend"
        payload = recorder.last_payload
        assert payload["temperature"] == 0.4
        assert payload["max_tokens"] == 1200

    @pytest.mark.asyncio
    async def test_structured_analysis_falls_back_to_text(self):
        recorder = Recorder(httpx.Response(200, json=chat_reply("Looks bullish overall.")))
        async with DeepSeekClient("key", http_transport=recorder.transport) as client:
            result = await client.analyze_ohlcv_structured(HISTORY)
        assert result == "Looks bullish overall."

    @pytest.mark.asyncio
    async def test_invalid_candle_is_rejected_before_sending(self):
        recorder = Recorder()
        bad = [{"open": 1, "high": 0, "low": 2, "close": 1, "volume": 1}]
        async with DeepSeekClient("key", http_transport=recorder.transport) as client:
            with pytest.raises(OHLCVParseError, match="Invalid input candle"):
                await client.analyze_ohlcv(bad)
        assert recorder.requests == []


class TestOpenAIEndpoints:
    """Images, embeddings, moderation and speech."""

    @pytest.mark.asyncio
    async def test_organization_header(self):
        recorder = Recorder()
        async with OpenAIClient("key", organization="org-7", http_transport=recorder.transport) as client:
            await client.chat("Hi")
        assert recorder.requests[-1].headers["OpenAI-Organization"] == "org-7"
        assert recorder.last_url == "https://api.openai.com/v1/chat/completions"

    @pytest.mark.asyncio
    async def test_generate_image(self):
        recorder = Recorder(httpx.Response(200, json={"data": [{"url": "https://img/1.png"}]}))
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            urls = await client.generate_image("a cat", size="1792x1024")

        assert urls == ["https://img/1.png"]
        assert recorder.last_url == "https://api.openai.com/v1/images/generations"
        assert recorder.last_payload["model"] == "dall-e-3"
        assert recorder.last_payload["size"] == "1792x1024"

    @pytest.mark.asyncio
    async def test_generate_image_base64(self):
        recorder = Recorder(httpx.Response(200, json={"data": [{"b64_json": "aGk="}]}))
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            assert await client.generate_image("a cat", response_format="b64_json") == ["aGk="]

    @pytest.mark.asyncio
    async def test_image_requires_image_model(self):
        recorder = Recorder()
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            with pytest.raises(UnsupportedModelError, match="Image generation is not supported"):
                await client.generate_image("a cat", model="gpt-4")
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_embeddings(self):
        recorder = Recorder(httpx.Response(200, json={
            "data": [{"embedding": [0.1, 0.2]}, {"embedding": [0.3, 0.4]}],
        }))
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            vectors = await client.create_embeddings(["a", "b"], dimensions=256)
            assert vectors == [[0.1, 0.2], [0.3, 0.4]]
            assert "dimensions" not in recorder.last_payload

            await client.create_embeddings("a", model="text-embedding-3-small", dimensions=256)
            assert recorder.last_payload["dimensions"] == 256

    @pytest.mark.asyncio
    async def test_embeddings_bad_shape(self):
        recorder = Recorder(httpx.Response(200, json={"object": "list"}))
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            with pytest.raises(UnparsableResponseError, match="Invalid response format from embeddings"):
                await client.create_embeddings("a")

    @pytest.mark.asyncio
    async def test_moderation(self):
        recorder = Recorder(httpx.Response(200, json={"results": [{"flagged": False}]}))
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            assert await client.moderate_content("hello") == [{"flagged": False}]
        assert recorder.last_payload == {"model": "text-moderation-latest", "input": "hello"}

    @pytest.mark.asyncio
    async def test_text_to_speech(self):
        recorder = Recorder(httpx.Response(200, content=b"ID3\x00audio"))
        async with OpenAIClient("key", http_transport=recorder.transport) as client:
            audio = await client.text_to_speech("hello", voice="nova", speed=1.25)

        assert audio == b"ID3\x00audio"
        assert recorder.last_url == "https://api.openai.com/v1/audio/speech"
        assert recorder.last_payload["voice"] == "nova"
        assert recorder.last_payload["speed"] == 1.25

    def test_estimate_cost(self):
        client = OpenAIClient("key", "gpt-4o")
        estimate = client.estimate_cost(2000, 1000)
        assert estimate.total_cost == pytest.approx(0.01 + 0.015)
