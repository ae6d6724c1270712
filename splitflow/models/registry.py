"""
Account and Tag Registries

The closed sets of names the ledger may refer to. Both are loaded once at
startup and only read afterwards.

- Accounts: the people sharing purchases. Per-account data that this
  package does not interpret (display colours, etc.) is kept as-is.
- Tags: spending categories, each with the number of days over which a
  purchase is amortized. A tag may name a parent; Tags.fix() materializes
  parents that are referenced but not defined.
"""

from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, RootModel

from splitflow.models.errors import UnknownReferenceError


class AccountData(BaseModel):
    """Per-account settings; extra keys survive a load/save round trip."""
    model_config = ConfigDict(extra="allow")


class Accounts(RootModel[dict[str, AccountData]]):
    """Known accounts, keyed by account name."""
    root: dict[str, AccountData] = Field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.root

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.root))

    def __len__(self) -> int:
        return len(self.root)

    def names(self) -> list[str]:
        return sorted(self.root)

    def require(self, name: str) -> AccountData:
        try:
            return self.root[name]
        except KeyError:
            raise UnknownReferenceError("account", name) from None


class TagData(BaseModel):
    dur: PositiveInt = Field(
        ...,
        description="Days over which a purchase under this tag is amortized"
    )
    parent: Optional[str] = Field(
        default=None,
        description="Parent tag, if any"
    )


class Tags(RootModel[dict[str, TagData]]):
    """Known spending categories, keyed by tag name."""
    root: dict[str, TagData] = Field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.root

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.root))

    def __len__(self) -> int:
        return len(self.root)

    def names(self) -> list[str]:
        return sorted(self.root)

    def get_data(self, name: str) -> TagData:
        try:
            return self.root[name]
        except KeyError:
            raise UnknownReferenceError("tag", name) from None

    def dur(self, name: str) -> int:
        return self.get_data(name).dur

    def fix(self) -> list[str]:
        """
        Define every parent tag that is referenced but missing.

        A missing parent inherits the duration of the child that names it.
        Only one pass is made: a materialized parent has no parent itself.

        Returns the names of the tags that were added.
        """
        added = []
        for name in sorted(self.root):
            data = self.root[name]
            if data.parent is not None and data.parent not in self.root:
                self.root[data.parent] = TagData(dur=data.dur)
                added.append(data.parent)
        return added
