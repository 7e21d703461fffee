from typing import FrozenSet

from pydantic import BaseModel

from mimecodec.mime import DEFAULT_MEMORY


class EncodingConfig(BaseModel):
    """
    Configuration for content negotiation and binding.
    """

    # bound for multipart bodies parsed while binding
    max_multipart_memory: int = DEFAULT_MEMORY
    # methods bound from the query string instead of the body
    retrieval_methods: FrozenSet[str] = frozenset({"GET", "HEAD"})
    json_use_number: bool = True
    wildcard_disallow_unknown_fields: bool = True
    json_logging: bool = False

    model_config = {"frozen": True}
