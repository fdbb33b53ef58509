from sqlalchemy import BigInteger, Column, Integer, String
from redirector_app.database.connection import Base


class ImportOrigin(Base):
    """
    One row per site that was migrated from another forum product.

    A site without a row was never migrated. That is a normal state,
    not an error.
    """
    __tablename__ = "import_origins"

    origin_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    site_id = Column(BigInteger, unique=True, nullable=False, index=True)
    product = Column(String(50), nullable=False)


class ImportedItem(Base):
    """
    Legacy id -> current id for every item brought across by one import run.

    Written once by the import tooling, only ever read here.
    old_id is text because some products use non-numeric ids; lookups
    compare it as a bigint.
    """
    __tablename__ = "imported_items"

    origin_id = Column(BigInteger, primary_key=True)
    item_type_id = Column(BigInteger, primary_key=True)
    old_id = Column(String, primary_key=True)
    item_id = Column(BigInteger, nullable=False)
