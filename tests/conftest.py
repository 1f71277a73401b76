"""Shared fixtures: canonical schemas and fake provider SDK clients."""

from types import SimpleNamespace

import pytest

from llm_structured.llm.models import Message, StructuredOutputRequest
from llm_structured.schema.nodes import (
    ArrayNode,
    BooleanNode,
    NumberNode,
    ObjectNode,
    StringNode,
)


class FakeOpenAISDK:
    """Stands in for openai.OpenAI: records create() kwargs, returns a canned completion."""

    def __init__(self, completion=None, error=None):
        self.completion = completion
        self.error = error
        self.requests = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.completion


class FakeGeminiSDK:
    """Stands in for google.genai.Client: records generate_content() kwargs."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []
        self.models = SimpleNamespace(generate_content=self._generate_content)

    def _generate_content(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def openai_completion(content=None, refusal=None):
    """Completion shaped like openai's ChatCompletion with one choice."""
    message = SimpleNamespace(role="assistant", content=content, refusal=refusal)
    return SimpleNamespace(id="chatcmpl-test", choices=[SimpleNamespace(index=0, message=message)])


def gemini_response(text=None, finish_reason="STOP", block_reason=None, candidates=True):
    """Response shaped like google.genai's GenerateContentResponse."""
    return SimpleNamespace(
        text=text,
        candidates=[SimpleNamespace(finish_reason=finish_reason)] if candidates else [],
        prompt_feedback=SimpleNamespace(block_reason=block_reason, block_reason_message=None),
    )


@pytest.fixture
def person_schema():
    """{name: string, age: integer}, both required."""
    return ObjectNode(
        properties={"name": StringNode(), "age": NumberNode(kind="integer")},
        required=("name", "age"),
    )


@pytest.fixture
def person_request(person_schema):
    return StructuredOutputRequest(schema=person_schema, schema_name="person")


@pytest.fixture
def bob_messages():
    return [Message(role="user", content="Bob is 42")]


@pytest.fixture
def cv_schema():
    """Nested CV schema exercising objects, arrays, numbers and strings."""
    experience = ObjectNode(
        properties={
            "title": StringNode(),
            "company": StringNode(),
            "period": StringNode(),
            "current": BooleanNode(),
        },
        required=("title", "company", "period", "current"),
    )
    return ObjectNode(
        properties={
            "name": StringNode(description="Full name"),
            "email": StringNode(format="email"),
            "skills": ArrayNode(items=StringNode(), min_items=1),
            "experience": ArrayNode(items=experience),
            "yearsOfExperience": NumberNode(minimum=0),
        },
        required=("name", "email", "skills", "experience", "yearsOfExperience"),
    )
