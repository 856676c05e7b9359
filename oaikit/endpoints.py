"""Request construction for the edit, embedding and model endpoints."""

from __future__ import annotations

from oaikit.chat import ApiRequest, Method, build_json_body


def edit_request(
    model_id: str,
    input: str | None = None,
    instruction: str | None = None,
    n: int | None = None,
    temperature: float | None = None,
    top_p: float | None = None,
) -> ApiRequest:
    """Build the request that asks for an edit of ``input`` following ``instruction``."""
    body = build_json_body(
        {
            "model": model_id,
            "input": input,
            "instruction": instruction,
            "n": n,
            "temperature": temperature,
            "top_p": top_p,
        }
    )
    return ApiRequest(method=Method.POST, path="/edits", body=body)


def embedding_request(
    model_id: str,
    input: str | None = None,
    user: str | None = None,
) -> ApiRequest:
    """Build the request that asks for an embedding vector of ``input``."""
    body = build_json_body({"model": model_id, "input": input, "user": user})
    return ApiRequest(method=Method.POST, path="/embeddings", body=body)


def list_models_request() -> ApiRequest:
    """Build the request that lists the available models."""
    return ApiRequest(method=Method.GET, path="/models")


def retrieve_model_request(model: str) -> ApiRequest:
    """Build the request that fetches one model's details."""
    return ApiRequest(method=Method.GET, path="/models/" + model)