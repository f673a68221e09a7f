"""HTTP API support: request schemas, serializers and error envelopes."""

from menuorder.api.errors import error_response, status_for
from menuorder.api.serializers import serialize_owner, serialize_section

__all__ = ["error_response", "status_for", "serialize_section", "serialize_owner"]
