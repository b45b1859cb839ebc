from typing import Dict
from pydantic import BaseModel, ConfigDict, Field, RootModel

class StoredSourceSize(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    code_size: int = Field(alias="codeSize")
    init_size: int = Field(alias="initSize")

class StoredContractSize(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    code_size: int = Field(alias="codeSize")
    init_size: int = Field(alias="initSize")
    sources: Dict[str, StoredSourceSize] = Field(default_factory=dict)

class HistorySnapshot(RootModel):
    """Sizes from a previous run, keyed by contract name."""
    root: Dict[str, StoredContractSize] = Field(default_factory=dict)

    def get(self, name: str):
        return self.root.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.root

    def __len__(self) -> int:
        return len(self.root)
