import json
from types import SimpleNamespace

import pytest

from oaikit.conversation import Conversation
from oaikit.functions import Functions
from oaikit.parameters import FunctionParameter


def _choice_response(role, content, function_call=None):
    message = {"role": role, "content": content}
    if function_call is not None:
        message["function_call"] = function_call
    return json.dumps({"choices": [{"index": 0, "message": message}]})


def _chunk(delta):
    return "data: " + json.dumps({"choices": [{"index": 0, "delta": delta}]}) + "\n\n"


def test_new_conversation_has_no_messages():
    conv = Conversation()
    assert conv.to_json() == {"messages": []}
    assert conv.last_response() == ""
    assert not conv.last_response_is_function_call()


def test_set_system_data_only_once():
    conv = Conversation()
    assert conv.set_system_data("be brief")
    assert not conv.set_system_data("be verbose")
    assert not conv.set_system_data("")
    assert conv.to_json()["messages"] == [{"role": "system", "content": "be brief"}]


def test_change_first_system_message():
    conv = Conversation()
    assert not conv.change_first_system_message("x")
    conv.add_user_data("hello")
    assert not conv.change_first_system_message("x")
    other = Conversation()
    other.set_system_data("old")
    assert not other.change_first_system_message("")
    assert other.change_first_system_message("new")
    assert other.to_json()["messages"][0]["content"] == "new"


def test_pop_system_data():
    conv = Conversation()
    assert not conv.pop_system_data()
    conv.set_system_data("sys")
    conv.add_user_data("hi")
    assert conv.pop_system_data()
    assert conv.to_json()["messages"] == [{"role": "user", "content": "hi"}]
    assert not conv.pop_system_data()


def test_add_and_pop_user_data():
    conv = Conversation()
    assert not conv.add_user_data("")
    assert conv.add_user_data("question", "alice")
    assert conv.to_json()["messages"][-1] == {"role": "user", "content": "question", "name": "alice"}
    assert conv.pop_user_data()
    assert not conv.pop_user_data()
    assert conv.to_json()["messages"] == []


def test_update_from_choices_sets_last_response():
    conv = Conversation()
    conv.add_user_data("hi")
    assert conv.update(_choice_response("assistant", "hello there"))
    assert conv.last_response() == "hello there"
    assert not conv.pop_user_data()
    assert conv.pop_last_response()
    assert conv.last_response() == ""
    assert not conv.pop_last_response()


def test_update_accepts_object_with_content():
    conv = Conversation()
    response = SimpleNamespace(content=_choice_response("assistant", "answer"))
    assert conv.update(response)
    assert conv.last_response() == "answer"


def test_update_null_content_becomes_empty():
    conv = Conversation()
    assert conv.update(_choice_response("assistant", None))
    assert conv.to_json()["messages"][-1] == {"role": "assistant", "content": ""}


def test_update_function_call_and_reset():
    conv = Conversation()
    call = {"name": "get_weather", "arguments": '{"city": "Oslo"}'}
    assert conv.update(_choice_response("assistant", None, call))
    assert conv.last_response_is_function_call()
    assert conv.last_function_call_name() == "get_weather"
    assert conv.last_function_call_arguments() == '{"city": "Oslo"}'
    assert conv.update(_choice_response("assistant", "sunny"))
    assert not conv.last_response_is_function_call()
    assert conv.last_function_call_name() == ""
    assert "function_call" not in conv.to_json()


def test_update_rejects_empty_and_invalid():
    conv = Conversation()
    assert not conv.update("")
    assert not conv.update(json.dumps({"other": 1}))
    assert not conv.update(json.dumps({"choices": []}))
    assert not conv.update(json.dumps({"choices": [{"index": 0}]}))
    assert not conv.update(json.dumps({"choices": [{"message": {"role": "assistant"}}]}))
    assert conv.to_json()["messages"] == []
    with pytest.raises(json.JSONDecodeError):
        conv.update("{not json")


def test_update_single_message_level():
    conv = Conversation()
    assert conv.update(json.dumps({"message": {"role": "assistant", "content": "text"}}))
    assert conv.to_json()["messages"][-1] == {"role": "assistant", "content": ""}
    assert not conv.update(json.dumps({"message": {"role": "assistant"}}))


def test_max_history_keeps_system_message():
    conv = Conversation()
    conv.set_max_history_size(2)
    conv.set_system_data("sys")
    conv.add_user_data("one")
    conv.add_user_data("two")
    conv.add_user_data("three")
    messages = conv.to_json()["messages"]
    assert messages[0] == {"role": "system", "content": "sys"}
    assert [m["content"] for m in messages[1:]] == ["two", "three"]


def test_max_history_without_system_drops_oldest():
    conv = Conversation()
    conv.set_max_history_size(1)
    conv.add_user_data("one")
    conv.add_user_data("two")
    conv.add_user_data("three")
    assert [m["content"] for m in conv.to_json()["messages"]] == ["two", "three"]


def _weather_functions():
    functions = Functions("get_weather")
    functions.set_description("get_weather", "Weather lookup")
    functions.set_parameter("get_weather", FunctionParameter("city", "string", "City name"))
    return functions


def test_export_import_round_trip():
    conv = Conversation()
    conv.set_system_data("sys")
    conv.add_user_data("hi")
    conv.update(_choice_response("assistant", "hello"))
    assert conv.set_functions(_weather_functions())

    exported = conv.export()
    restored = Conversation()
    assert restored.import_json(exported)
    assert restored.to_json()["messages"] == conv.to_json()["messages"]
    assert restored.functions_json() == conv.functions_json()
    assert restored.export() == exported


def test_import_rejects_missing_messages():
    conv = Conversation()
    assert not conv.import_json("")
    assert not conv.import_json(json.dumps({"functions": []}))
    assert not conv.has_functions()


def test_set_and_pop_functions():
    conv = Conversation()
    assert not conv.set_functions(Functions())
    assert not conv.has_functions()
    assert conv.raw_functions() == ""
    with pytest.raises(ValueError):
        conv.functions_json()
    functions = _weather_functions()
    assert conv.set_functions(functions)
    assert conv.has_functions()
    assert conv.functions_json() == functions.to_json()
    assert json.loads(conv.raw_functions()) == functions.to_json()
    conv.pop_functions()
    assert not conv.has_functions()


def test_raw_conversation_and_str():
    conv = Conversation()
    conv.add_user_data("hi")
    raw = conv.raw_conversation()
    assert json.loads(raw) == conv.to_json()
    assert "\n    " in raw
    conv.set_functions(_weather_functions())
    text = str(conv)
    assert text == raw + "\n" + conv.raw_functions()


def test_to_json_is_a_copy():
    conv = Conversation()
    document = conv.to_json()
    document["messages"].append({"role": "user", "content": "x"})
    assert conv.to_json()["messages"] == []


def test_stream_builds_assistant_message():
    conv = Conversation()
    conv.add_user_data("hi")
    first = conv.append_stream_data(_chunk({"role": "assistant", "content": ""}) + _chunk({"content": "Hel"}))
    assert first is not None
    assert first.delta == "Hel"
    assert not first.completed
    assert conv.to_json()["messages"][-1]["pending"] is True

    second = conv.append_stream_data(_chunk({"content": "lo"}) + "data: [DONE]\n\n")
    assert second is not None
    assert second.delta == "lo"
    assert second.completed
    assert conv.to_json()["messages"][-1] == {"role": "assistant", "content": "Hello"}
    assert conv.last_response() == "Hello"


def test_stream_event_split_across_chunks():
    conv = Conversation()
    whole = _chunk({"role": "assistant", "content": "split"})
    cut = len(whole) // 2
    first = conv.append_stream_data(whole[:cut])
    assert first is not None and first.delta == ""
    second = conv.append_stream_data(whole[cut:])
    assert second is not None
    assert second.delta == "split"
    assert conv.to_json()["messages"][-1]["content"] == "split"


def test_stream_rejects_empty_and_missing_choices():
    conv = Conversation()
    assert conv.append_stream_data("") is None
    assert conv.append_stream_data("\n\n") is None
    assert conv.append_stream_data('data: {"id": "x"}\n\n') is None


def test_stream_function_call_arguments_concatenate():
    conv = Conversation()
    conv.append_stream_data(_chunk({"role": "assistant", "function_call": {"name": "get_weather"}}))
    conv.append_stream_data(_chunk({"function_call": {"arguments": '{"city":'}}))
    update = conv.append_stream_data(_chunk({"function_call": {"arguments": ' "Oslo"}'}}) + "data: [DONE]\n\n")
    assert update is not None and update.completed
    assert conv.last_response_is_function_call()
    assert conv.last_function_call_name() == "get_weather"
    assert conv.last_function_call_arguments() == '{"city": "Oslo"}'


def test_stream_content_clears_previous_function_call():
    conv = Conversation()
    conv.append_stream_data(_chunk({"role": "assistant", "function_call": {"name": "f"}}) + "data: [DONE]\n\n")
    assert conv.last_response_is_function_call()
    conv.append_stream_data(_chunk({"role": "assistant", "content": "text"}))
    assert not conv.last_response_is_function_call()
    assert conv.last_function_call_name() == ""