"""Declarative item classes for the new-generation mapper.

Column names are the DynamoDB attribute names; the mapped Python attributes
use snake_case.
"""

from sqlalchemy import JSON, Column, Integer, LargeBinary, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class TinyBean(Base):
    """Item with nothing but a partition key."""

    __tablename__ = "tiny_bean"

    hash_key = Column("hashKey", String, primary_key=True)


class SmallBean(Base):
    """Item with a handful of scalar and list attributes."""

    __tablename__ = "small_bean"

    hash_key = Column("hashKey", String, primary_key=True)
    string_attr = Column("stringAttr", String)
    binary_attr = Column("binaryAttr", LargeBinary)
    list_attr = Column("listAttr", JSON)


class HugeBean(Base):
    """Item with large lists and several levels of nested maps."""

    __tablename__ = "huge_bean"

    hash_key = Column("hashKey", String, primary_key=True)
    string_attr = Column("stringAttr", String)
    binary_attr = Column("binaryAttr", LargeBinary)
    int_attr = Column("intAttr", Integer)
    list_attr = Column("listAttr", JSON)
    hash_map_attr1 = Column("hashMapAttr1", JSON)
    map_attr1 = Column("mapAttr1", JSON)
    map_attr2 = Column("mapAttr2", JSON)
    map_attr3 = Column("mapAttr3", JSON)


class HugeBeanFlat(Base):
    """Item with many flat string attributes."""

    __tablename__ = "huge_bean_flat"

    hash_key = Column("hashKey", String, primary_key=True)
    string_attr1 = Column("stringAttr1", String)
    string_attr2 = Column("stringAttr2", String)
    string_attr3 = Column("stringAttr3", String)
    string_attr4 = Column("stringAttr4", String)
    string_attr5 = Column("stringAttr5", String)
    string_attr6 = Column("stringAttr6", String)
    string_attr7 = Column("stringAttr7", String)
    string_attr8 = Column("stringAttr8", String)
    string_attr9 = Column("stringAttr9", String)
    string_attr10 = Column("stringAttr10", String)
    string_attr11 = Column("stringAttr11", String)
    string_attr12 = Column("stringAttr12", String)
    string_attr13 = Column("stringAttr13", String)
    string_attr14 = Column("stringAttr14", String)
    string_attr15 = Column("stringAttr15", String)
    string_attr16 = Column("stringAttr16", String)
    string_attr17 = Column("stringAttr17", String)
    string_attr18 = Column("stringAttr18", String)
    string_attr19 = Column("stringAttr19", String)
    string_attr20 = Column("stringAttr20", String)
    string_attr21 = Column("stringAttr21", String)
    string_attr22 = Column("stringAttr22", String)
    string_attr23 = Column("stringAttr23", String)
    string_attr24 = Column("stringAttr24", String)
    string_attr25 = Column("stringAttr25", String)
    string_attr26 = Column("stringAttr26", String)
    string_attr27 = Column("stringAttr27", String)
    string_attr28 = Column("stringAttr28", String)
    string_attr29 = Column("stringAttr29", String)
    string_attr30 = Column("stringAttr30", String)
    string_attr31 = Column("stringAttr31", String)
    string_attr32 = Column("stringAttr32", String)
    string_attr33 = Column("stringAttr33", String)
    string_attr34 = Column("stringAttr34", String)
    string_attr35 = Column("stringAttr35", String)
    string_attr36 = Column("stringAttr36", String)
    string_attr37 = Column("stringAttr37", String)
    string_attr38 = Column("stringAttr38", String)
    string_attr39 = Column("stringAttr39", String)
    string_attr40 = Column("stringAttr40", String)
    string_attr41 = Column("stringAttr41", String)
    string_attr42 = Column("stringAttr42", String)
    string_attr43 = Column("stringAttr43", String)
    string_attr44 = Column("stringAttr44", String)
    string_attr45 = Column("stringAttr45", String)
    string_attr46 = Column("stringAttr46", String)
    string_attr47 = Column("stringAttr47", String)
    string_attr48 = Column("stringAttr48", String)
    string_attr49 = Column("stringAttr49", String)
    string_attr50 = Column("stringAttr50", String)
    string_attr51 = Column("stringAttr51", String)
    string_attr52 = Column("stringAttr52", String)
    string_attr53 = Column("stringAttr53", String)
    string_attr54 = Column("stringAttr54", String)
    string_attr55 = Column("stringAttr55", String)
    string_attr56 = Column("stringAttr56", String)
    string_attr57 = Column("stringAttr57", String)
    string_attr58 = Column("stringAttr58", String)
    string_attr59 = Column("stringAttr59", String)
    string_attr60 = Column("stringAttr60", String)
    string_attr61 = Column("stringAttr61", String)
    string_attr62 = Column("stringAttr62", String)
    string_attr63 = Column("stringAttr63", String)
