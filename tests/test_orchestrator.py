import json

import pytest

from conftest import FakeBackend, FakeLLM, call_reply, text_reply
from orchestration.errors import (
    BackendError,
    ClientInputError,
    ConfigurationError,
    DepthExceededError,
    UnknownFunctionError,
    UpstreamProtocolError,
)
from orchestration.orchestrator import Orchestrator
from schemas.conversation import ConversationTurn, FunctionCall, Role


SPECIALISTS = {
    "specialists": [
        {"id": 1, "name": "MUDr. Ján Novák", "specialty_id": 7, "address": "Hlavná 1, Košice"},
        {"id": 2, "name": "MUDr. Eva Malá", "specialty_id": 7, "address": "Moyzesova 5, Košice"},
    ]
}


@pytest.mark.parametrize("text", [None, "", "   "])
async def test_blank_message_is_rejected_without_calls(make_orchestrator, text):
    llm = FakeLLM([text_reply("unused")])
    backend = FakeBackend()

    with pytest.raises(ClientInputError):
        await make_orchestrator(llm, backend).handle_user_message(text)

    assert llm.calls == []
    assert backend.calls == []


async def test_missing_credentials_skip_llm(make_orchestrator):
    llm = FakeLLM([text_reply("unused")], configured=False)

    with pytest.raises(ConfigurationError):
        await make_orchestrator(llm).handle_user_message("ortopéd Košice")

    assert llm.calls == []


async def test_plain_answer_ends_on_first_round(make_orchestrator, registry):
    llm = FakeLLM([text_reply("Dobrý deň, ako vám môžem pomôcť?")])
    backend = FakeBackend()

    result = await make_orchestrator(llm, backend).handle_user_message("ahoj")

    assert result.answer == "Dobrý deň, ako vám môžem pomôcť?"
    assert result.rounds == 1
    assert backend.calls == []
    assert llm.calls[0]["messages"] == [{"role": "user", "content": "ahoj"}]
    assert llm.calls[0]["functions"] == registry.as_llm_functions()


async def test_function_call_is_routed_to_mapped_backend_path(make_orchestrator):
    arguments = '{"specialty_id": 7, "radius": 5000, "user_location": "POINT(21.25 48.72)"}'
    llm = FakeLLM([call_reply("specialist-find", arguments), text_reply("Našiel som dvoch ortopédov.")])
    backend = FakeBackend({"specialist/find": SPECIALISTS})

    result = await make_orchestrator(llm, backend).handle_user_message("ortopéd Košice")

    assert backend.calls == [{"route": "specialist/find", "arguments": arguments}]
    assert result.answer == "Našiel som dvoch ortopédov."
    assert result.rounds == 2
    assert result.functions_called == ["specialist-find"]

    second_round = llm.calls[1]["messages"]
    assert second_round[1] == {
        "role": "assistant",
        "content": None,
        "function_call": {"name": "specialist-find", "arguments": arguments},
    }
    assert second_round[2]["role"] == "function"
    assert second_round[2]["name"] == "specialist-find"
    assert json.loads(second_round[2]["content"]) == SPECIALISTS


async def test_multi_step_search(make_orchestrator):
    llm = FakeLLM([
        call_reply("location-wkt", '{"user_location": "Košice"}'),
        call_reply("specialties-all", ""),
        call_reply("specialist-find", '{"specialty_id": 7, "radius": 10000, "user_location": "POINT(21.25 48.72)"}'),
        text_reply("1. **MUDr. Ján Novák** Address: Hlavná 1"),
    ])
    backend = FakeBackend({
        "location/wkt": {"wkt_location": "POINT(21.25 48.72)"},
        "specialty/all": {"specialties": [{"id": 7, "name": "ortopédia"}]},
        "specialist/find": SPECIALISTS,
    })

    result = await make_orchestrator(llm, backend).handle_user_message("ortopéd Košice")

    assert [c["route"] for c in backend.calls] == ["location/wkt", "specialty/all", "specialist/find"]
    assert result.rounds == 4
    # user turn + 3 x (assistant call, function result)
    assert len(llm.calls[-1]["messages"]) == 7


async def test_loop_stops_at_iteration_cap(make_orchestrator):
    llm = FakeLLM([call_reply("specialties-all")])
    backend = FakeBackend({"specialty/all": {"specialties": []}})

    with pytest.raises(DepthExceededError):
        await make_orchestrator(llm, backend).handle_user_message("loop forever")

    assert len(llm.calls) == 10
    assert len(backend.calls) == 10


async def test_iteration_cap_is_configurable(make_orchestrator):
    llm = FakeLLM([call_reply("specialties-all")])

    with pytest.raises(DepthExceededError):
        await make_orchestrator(llm, max_iterations=3).handle_user_message("loop")

    assert len(llm.calls) == 3


def test_iteration_cap_must_be_positive(registry):
    with pytest.raises(ValueError):
        Orchestrator(llm=FakeLLM([text_reply("x")]), backend=FakeBackend(), registry=registry, max_iterations=0)


async def test_prior_transcript_is_forwarded_verbatim(make_orchestrator):
    prior = [
        ConversationTurn(role=Role.USER, content="Hľadám zubára"),
        ConversationTurn(role=Role.ASSISTANT, content="Kde sa nachádzate?"),
    ]
    llm = FakeLLM([call_reply("location-wkt", '{"user_location": "Prešov"}'), text_reply("Hotovo")])
    backend = FakeBackend({"location/wkt": {"wkt_location": "POINT(21.24 49.0)"}})

    await make_orchestrator(llm, backend).handle_user_message("Prešov", prior_transcript=prior)

    first = llm.calls[0]["messages"]
    assert first == [
        {"role": "user", "content": "Hľadám zubára"},
        {"role": "assistant", "content": "Kde sa nachádzate?"},
        {"role": "user", "content": "Prešov"},
    ]
    second = llm.calls[1]["messages"]
    assert second[:3] == first
    assert [m["role"] for m in second[3:]] == ["assistant", "function"]
    # caller's list is not mutated
    assert len(prior) == 2


async def test_prior_function_turns_keep_their_fields(make_orchestrator):
    prior = [
        ConversationTurn(role=Role.USER, content="ortopéd"),
        ConversationTurn.assistant_call(FunctionCall(name="specialties-all", arguments="")),
        ConversationTurn.function_result(name="specialties-all", content='{"specialties": []}'),
        ConversationTurn(role=Role.ASSISTANT, content="Nenašiel som nič."),
    ]
    llm = FakeLLM([text_reply("ok")])

    await make_orchestrator(llm).handle_user_message("skús znova", prior_transcript=prior)

    messages = llm.calls[0]["messages"]
    assert messages[:4] == [turn.to_message() for turn in prior]
    assert messages[1]["content"] is None
    assert messages[2]["name"] == "specialties-all"


async def test_unknown_function_aborts_turn(make_orchestrator):
    backend = FakeBackend()
    llm = FakeLLM([call_reply("delete-everything")])

    with pytest.raises(UnknownFunctionError):
        await make_orchestrator(llm, backend).handle_user_message("hi")

    assert backend.calls == []


async def test_upstream_protocol_error_propagates(make_orchestrator):
    llm = FakeLLM([UpstreamProtocolError("no choices")])

    with pytest.raises(UpstreamProtocolError):
        await make_orchestrator(llm).handle_user_message("hi")


async def test_backend_failure_aborts_turn(make_orchestrator):
    llm = FakeLLM([call_reply("specialties-all"), text_reply("never reached")])
    backend = FakeBackend(error=BackendError("backend_unreachable"))

    with pytest.raises(BackendError):
        await make_orchestrator(llm, backend).handle_user_message("hi")

    assert len(llm.calls) == 1


async def test_null_content_becomes_empty_answer(make_orchestrator):
    llm = FakeLLM([text_reply(None)])

    result = await make_orchestrator(llm).handle_user_message("hi")

    assert result.answer == ""
