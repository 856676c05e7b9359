# oaikit

Building blocks for talking to a chat-completion style HTTP API:

- `oaikit.conversation.Conversation` keeps the message history. It holds
  system and user messages, assistant replies, function calls and streamed
  deltas.
- `oaikit.functions.Functions` and `oaikit.parameters.FunctionParameter`
  describe the functions that the model may call.
- `oaikit.chat.chat_completion_request` and the helpers in
  `oaikit.endpoints` build an `ApiRequest`. An `ApiRequest` holds the
  method, path, content type, JSON body, query parameters and an optional
  stream callback. You send it with whatever HTTP client you like.

The package has no runtime dependencies.

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## A conversation

```python
from oaikit.conversation import Conversation

conv = Conversation()
conv.set_system_data("You are a helpful assistant.")
conv.add_user_data("What is the capital of France?")

# Send the request, then feed the raw JSON reply back in:
conv.update(response_text)
print(conv.last_response())
```

`update()` takes either the response body as a string or an object with a
`content` attribute. For a body with `choices`, it appends the message of
the first choice. It returns `False` when the body holds no usable message.
It raises `json.JSONDecodeError` when the body is not JSON.

Other methods:

- `set_system_data`, `change_first_system_message` and `pop_system_data`
  manage the single system message.
- `pop_user_data` removes the last message if the user wrote it.
- `pop_last_response` removes the last message if the assistant wrote it.

`set_max_history_size(size)` limits the history. When a user message or a
reply is added and the history is already over the limit, one message is
dropped first: the oldest one that is not the leading system message.

`export()` serialises the messages to a JSON string, together with any
functions that are set. `import_json(data)` loads them back.

`raw_conversation()`, `raw_functions()`, `to_json()`, `functions_json()` and
`str(conv)` give views of the internal documents.

## Functions

```python
from oaikit.functions import Functions
from oaikit.parameters import FunctionParameter

funcs = Functions("get_weather")
funcs.set_description("get_weather", "Get the current weather")
funcs.set_parameters(
    "get_weather",
    FunctionParameter("location", "string", "City and state"),
    FunctionParameter("unit", "string", "Temperature unit", ["celsius", "fahrenheit"]),
)
funcs.set_required("get_weather", "location")

conv.set_functions(funcs)
```

Methods that take several names or parameters accept them either one by
one or as a single list. Each method returns `True` or `False` to say
whether it made the change.

After an update, `last_response_is_function_call()` tells you whether the
model asked for a call. `last_function_call_name()` and
`last_function_call_arguments()` return its details.

## Building a request

```python
from oaikit.chat import chat_completion_request

request = chat_completion_request("gpt-3.5-turbo", conv, function_call="auto", temperature=0.7)
request.method        # Method.POST
request.url("https://api.example.com/v1")
request.payload()     # the JSON body as a dict
```

Options left as `None` are not put in the body. When you pass a `stream`
callback, the body gets `"stream": true`. `request.stream` then calls your
callback with each chunk and the conversation.

`oaikit.endpoints` builds these requests:

- `edit_request`
- `embedding_request`
- `list_models_request`
- `retrieve_model_request`

## Streaming

Pass each chunk of server-sent events to `conv.append_stream_data(chunk)`.
It returns a `StreamUpdate`:

- `delta` holds the text that the chunk added.
- `completed` says whether `data: [DONE]` has arrived.

It returns `None` for an empty chunk, or for an event without `choices`.
A line that is cut off between chunks is kept and joined with the next
chunk. `oaikit.streaming` also has `split_streamed_data`,
`split_full_streamed_data` and `remove_strings` for splitting raw stream
text.

## What the package does not do

- It performs no HTTP calls and handles no authorisation. Sending the
  request and reading the response is up to your own client.
- It has no support for uploading or managing files, fine-tunes or images.