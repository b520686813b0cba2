#import modeli zeby SQLAlchemy zarejestrowal je w Base.metadata

from mcstore.data.models.session import LocalSessionModel

__all__ = ["LocalSessionModel"]
