import io

import aiohttp
from PIL import Image

from .errors import FetchError, LoadError
from .log import logger


def is_local_reference(reference: str) -> bool:
    return reference.startswith("./") or reference.startswith("/") or "://" not in reference


def _decode(source, reference: str) -> Image.Image:
    try:
        with Image.open(source) as img:
            return img.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise LoadError(f"Failed to load image: {reference}. Error: {e}", reference) from e


class ImageLoader:
    """Resolves avatar and background references into RGBA bitmaps.

    A session passed in by the caller is reused and never closed here; one
    created on demand belongs to the loader and is released by ``close()``.
    ``timeout`` only applies to sessions the loader creates itself.
    """

    def __init__(self, session: aiohttp.ClientSession | None = None, timeout: float | None = None):
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session
        self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self._timeout))
        self._owns_session = True
        return self._session

    async def load(self, reference: str) -> Image.Image:
        if is_local_reference(reference):
            logger.debug(f"Loading local image: {reference}")
            return _decode(reference, reference)

        data = await self._fetch(reference)
        return _decode(io.BytesIO(data), reference)

    async def load_optional(self, reference: str | None) -> Image.Image | None:
        if not reference:
            return None
        return await self.load(reference)

    async def _fetch(self, url: str) -> bytes:
        session = await self._get_session()
        logger.debug(f"Fetching image: {url}")
        try:
            async with session.get(url) as resp:
                if not resp.ok:
                    raise FetchError(
                        f"Failed to fetch image: {resp.status} {resp.reason} ({url})",
                        url,
                        resp.status,
                    )
                return await resp.read()
        except aiohttp.ClientError as e:
            raise FetchError(f"Failed to fetch image: {url}. Error: {e}", url) from e

    async def close(self):
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "ImageLoader":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
