"""Image deletion endpoint.

POST /api/storage/delete_image {"path": "<bucket path or public URL>"}
Answers ``ok`` on success.
"""

from api._http import JsonHandler
from protea.services.storage import remove_listing_image
from protea.utils.errors import ListingValidationError


class handler(JsonHandler):
    """Image deletion handler for Vercel serverless function."""

    async def _delete(self):
        body = self.read_json()
        path = body.get("path")
        if not isinstance(path, str) or not path.strip():
            raise ListingValidationError("path is required", field="path")

        await self.authenticate()
        await remove_listing_image(path)
        return 200, "ok"

    def do_POST(self):
        """Handle POST request."""
        self.dispatch(self._delete)
