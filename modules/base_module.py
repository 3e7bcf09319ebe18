from abc import ABC, abstractmethod

from telegram.ext import Application


class BaseModule(ABC):
    @abstractmethod
    def install(self, application: Application) -> None:
        pass
