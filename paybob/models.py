from sqlalchemy import Column, Integer, String, Numeric, DateTime, Boolean, Text, JSON, LargeBinary, ForeignKey
from sqlalchemy.orm import declarative_base, relationship
import datetime

Base = declarative_base()

TRANSACTION_TYPES = ("payment", "adjustment", "interest", "settlement")
MEMBER_ROLES = ("admin", "member")
SPLIT_TYPES = ("equal", "exact", "percentage")


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)

    balances = relationship("Balance", cascade="all")


class Balance(Base):
    __tablename__ = 'balances'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(String, nullable=False)
    is_owed_to_me = Column(Boolean, nullable=False, default=True)
    other_person_name = Column(String, nullable=False, index=True)
    other_person_contact = Column(String, nullable=True)
    due_date = Column(DateTime, nullable=True)
    tags = Column(JSON, nullable=False, default=list)  # unique labels, stored sorted
    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    is_settled = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    transactions = relationship("Transaction", cascade="all, delete-orphan", order_by="Transaction.id")


class Transaction(Base):
    __tablename__ = 'transactions'

    id = Column(Integer, primary_key=True)
    balance_id = Column(Integer, ForeignKey("balances.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(String, nullable=False)
    type = Column(String, nullable=False, default="payment")
    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)


class Group(Base):
    __tablename__ = 'groups'

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    total_expenses = Column(Numeric(15, 2), nullable=False, default=0)  # cache of the expense amounts

    members = relationship("GroupMember", cascade="all", order_by="GroupMember.id")
    expenses = relationship("GroupExpense", cascade="all", order_by="GroupExpense.id")


class GroupMember(Base):
    __tablename__ = 'group_members'

    id = Column(Integer, primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    role = Column(String, nullable=False, default="member")
    joined_at = Column(DateTime, default=datetime.datetime.now, nullable=False)


class GroupExpense(Base):
    __tablename__ = 'group_expenses'

    id = Column(Integer, primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(String, nullable=False)
    paid_by = Column(String, nullable=False)  # free text, not a member reference
    split_type = Column(String, nullable=False, default="equal")
    split_details = Column(JSON, nullable=True)
    category = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    receipt_image = Column(LargeBinary, nullable=True)
