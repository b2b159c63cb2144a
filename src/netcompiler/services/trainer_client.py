import httpx

from netcompiler.schemas.project import Train


class TrainerClient:
    """Forward Train bodies to a remote trainer service."""

    def __init__(self, base_url: str, timeout: float = 10.0, transport=None) -> None:
        self.base_url = base_url
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def submit(self, train: Train) -> dict:
        resp = await self.client.post("/train", json=train.model_dump(mode="json", by_alias=True))
        resp.raise_for_status()
        return resp.json()

    async def close(self) -> None:
        await self.client.aclose()
