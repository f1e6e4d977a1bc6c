"""Description extraction endpoint: advisory form values from pasted text.

POST /api/listings/extract {"text": "LT 120 LB 90 KT 3+1 ..."}
"""

from api._http import JsonHandler
from protea.services.listing_extractor import extract_listing_fields
from protea.utils.errors import ListingValidationError


class handler(JsonHandler):
    """Extraction handler for Vercel serverless function."""

    async def _extract(self):
        body = self.read_json()
        text = body.get("text")
        if not isinstance(text, str) or not text.strip():
            raise ListingValidationError("text is required", field="text")

        await self.authenticate()
        fields = await extract_listing_fields(text)
        return 200, {"fields": fields.form_values()}

    def do_POST(self):
        """Handle POST request."""
        self.dispatch(self._extract)
