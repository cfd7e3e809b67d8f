"""Abstract capabilities an agent needs from its LLM provider and its GitHub repository."""

from abc import ABC, abstractmethod


class Provider(ABC):
    @abstractmethod
    def get_api_key(self) -> str: ...

    @abstractmethod
    def get_model_name(self) -> str: ...

    @abstractmethod
    def get_provider_name(self) -> str: ...

    @abstractmethod
    def get_env(self) -> dict[str, str]: ...


class GitHub(ABC):
    @abstractmethod
    def get_api_token(self) -> str: ...

    @abstractmethod
    def get_api_url(self) -> str: ...

    @abstractmethod
    def get_repo(self) -> str: ...

    @abstractmethod
    def get_full_repo_url(self) -> str: ...

    @abstractmethod
    def get_pr_number(self) -> int: ...

    @abstractmethod
    def get_issue_number(self) -> int: ...

    @abstractmethod
    def get_branch_name(self) -> str: ...
