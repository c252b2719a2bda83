from pydantic import BaseModel


class Item(BaseModel):
    """An entry in the pool as the host stores it.

    The id is generated by the host when the item is added and never changes.
    """
    id: str
    name: str
    image: str | None = None
