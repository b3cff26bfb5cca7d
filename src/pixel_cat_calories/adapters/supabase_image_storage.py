"""Supabase Storage bucket for meal photos."""

from dataclasses import dataclass

from supabase import Client

from pixel_cat_calories.services.food_log import ImageStorage


@dataclass
class SupabaseImageStorage(ImageStorage):
    """Stores uploads in a public Supabase Storage bucket."""

    client: Client
    bucket: str

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Upload bytes and return the public URL."""
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(path, content, {"content-type": content_type})
        return bucket.get_public_url(path)
