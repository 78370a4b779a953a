"""
Schemas
Pydantic records shared by both storage backends, and the request schemas
that validate JSON payloads before anything is written.

Amounts are integer paise inside the application and two-decimal strings in JSON.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import (AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field,
                      PlainSerializer, field_validator, model_validator)
from pydantic import ValidationError as SchemaError
from pydantic.alias_generators import to_camel

from stallpos.errors import ValidationError
from stallpos.utils.money import format_paise, to_paise
from stallpos.utils.periods import parse_date

SESSION_PRE_BILLING = 'pre-billing'
SESSION_BILLING = 'billing'
SESSION_ENDED = 'ended'


def _not_negative(value):
    if value < 0:
        raise ValueError('amount must not be negative')
    return value


def _blank_as_zero(value):
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0
    return to_paise(value)


def _none_as_blank(value):
    return '' if value is None else value


# Stored amount in paise, rendered as "50.00"
Money = Annotated[int, PlainSerializer(format_paise, return_type=str, when_used='json')]

# Incoming rupee amount ("25.00", 25, 25.5) parsed to paise
Amount = Annotated[int, BeforeValidator(to_paise), AfterValidator(_not_negative)]
OptionalAmount = Annotated[int, BeforeValidator(_blank_as_zero), AfterValidator(_not_negative)]

# Optional text field where null means empty
Text = Annotated[str, BeforeValidator(_none_as_blank)]


class Record(BaseModel):
    """Immutable stored record"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_dict(self):
        return self.model_dump(mode='json', by_alias=True)


class Payload(BaseModel):
    """Incoming JSON body"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True,
                              str_strip_whitespace=True)


def parse_payload(schema, data, prefix='Invalid data'):
    """
    Validate a JSON body against a request schema

    Raises:
        ValidationError: With a readable message listing the bad fields
    """
    if not isinstance(data, dict):
        raise ValidationError(f"{prefix}: expected a JSON object")
    try:
        return schema.model_validate(data)
    except SchemaError as exc:
        raise ValidationError.from_pydantic(exc, prefix) from exc


# =============================================================================
# RECORDS
# =============================================================================

class User(Record):
    id: str
    username: str
    password_hash: str

    def to_dict(self):
        return {'id': self.id, 'username': self.username}


class Category(Record):
    id: str
    name: str
    sub_categories: List[str] = Field(default_factory=list)
    created_at: datetime


class MenuItem(Record):
    id: str
    name: str
    description: str = ''
    price: Money = 0
    category: str = ''
    sub_category: Optional[str] = None
    image: str = ''
    available: bool = True


class LineItem(Record):
    id: str
    name: str
    price: Money
    quantity: int


class Extra(Record):
    name: str
    amount: Money


class CashPayment(Record):
    method: Literal['cash'] = 'cash'


class GPayPayment(Record):
    method: Literal['gpay'] = 'gpay'


class SplitPayment(Record):
    method: Literal['split'] = 'split'
    gpay_amount: Money = 0
    cash_amount: Money = 0


class CreditorPayment(Record):
    """Sale recorded as owed; counts toward totals, not toward collections"""
    method: Literal['creditor'] = 'creditor'
    name: str
    total_amount: Money = 0
    paid_amount: Money = 0
    balance_amount: Money = 0


Payment = Annotated[
    Union[CashPayment, GPayPayment, SplitPayment, CreditorPayment],
    Field(discriminator='method'),
]


def payment_details(payment):
    """Extra payment fields without the method tag, None when there are none"""
    details = payment.model_dump(exclude={'method'})
    return details or None


def payment_from_fields(method, split_payment=None, creditor=None):
    """
    Rebuild a payment variant from its flat stored form

    Args:
        method: 'gpay', 'cash', 'split' or 'creditor'
        split_payment: dict with gpay_amount/cash_amount in paise
        creditor: dict with name and paise amounts
    """
    if method == 'split':
        return SplitPayment(**(split_payment or {}))
    if method == 'creditor':
        return CreditorPayment(**(creditor or {'name': ''}))
    if method == 'gpay':
        return GPayPayment()
    if method == 'cash':
        return CashPayment()
    raise ValueError(f'Unknown payment method {method!r}')


class Transaction(Record):
    id: str
    items: List[LineItem]
    total_amount: Money
    payment: Payment
    biller_name: str
    extras: Optional[List[Extra]] = None
    created_at: datetime
    date: str
    day_name: str
    time: str

    @property
    def payment_method(self):
        return self.payment.method

    def to_dict(self):
        data = self.model_dump(mode='json', by_alias=True, exclude={'payment'})
        details = self.payment.model_dump(mode='json', by_alias=True, exclude={'method'})
        data['paymentMethod'] = self.payment.method
        data['splitPayment'] = details if self.payment.method == 'split' else None
        data['creditor'] = details if self.payment.method == 'creditor' else None
        return data


class SummaryRecord(Record):
    id: str
    total_amount: Money = 0
    gpay_amount: Money = 0
    cash_amount: Money = 0
    order_count: int = 0
    created_at: datetime


class DailySummary(SummaryRecord):
    date: str


class WeeklySummary(SummaryRecord):
    week_start: str
    week_end: str


class MonthlySummary(SummaryRecord):
    month: str


class InventorySession(Record):
    id: str
    date: str
    status: Literal['pre-billing', 'billing', 'ended']
    start_time: datetime
    end_time: Optional[datetime] = None
    created_at: datetime


class InventoryItem(Record):
    id: str
    session_id: str
    menu_item_id: str
    stock_in: int
    stock_out: int = 0
    stock_left: int
    created_at: datetime


class InventoryItemWithMenu(InventoryItem):
    menu_item: MenuItem


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class LoginIn(Payload):
    username: str
    password: str


class CategoryIn(Payload):
    name: str
    sub_categories: List[str] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def name_required(cls, value):
        if not value:
            raise ValueError('Category name is required')
        return value


class CategoryUpdate(Payload):
    name: Optional[str] = None
    sub_categories: Optional[List[str]] = None


class MenuItemIn(Payload):
    name: Text = Field('', validate_default=True)
    description: Text = ''
    price: OptionalAmount = 0
    category: Text = ''
    sub_category: Optional[str] = None
    image: Text = ''
    available: bool = True

    @field_validator('name')
    @classmethod
    def name_required(cls, value):
        if not value:
            raise ValueError('Menu item name is required')
        return value

    @field_validator('sub_category')
    @classmethod
    def blank_as_none(cls, value):
        return value or None


class MenuItemUpdate(Payload):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[OptionalAmount] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    image: Optional[str] = None
    available: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, value):
        if value is not None and not value:
            raise ValueError('Menu item name must not be blank')
        return value

    def changes(self):
        """Fields present in the request; sub_category may be cleared with null"""
        data = self.model_dump(exclude_unset=True)
        return {key: value for key, value in data.items()
                if value is not None or key == 'sub_category'}


class LineItemIn(Payload):
    id: str = Field(min_length=1)
    name: str
    price: Amount
    quantity: int = Field(ge=1)


class ExtraIn(Payload):
    name: str
    amount: Amount


class SplitPaymentIn(Payload):
    gpay_amount: Amount = 0
    cash_amount: Amount = 0


class CreditorIn(Payload):
    name: str = Field(min_length=1)
    total_amount: Amount = 0
    paid_amount: Amount = 0
    balance_amount: Amount = 0


class TransactionIn(Payload):
    items: List[LineItemIn] = Field(min_length=1)
    total_amount: Amount
    payment_method: Literal['gpay', 'cash', 'split', 'creditor']
    biller_name: Optional[str] = None
    split_payment: Optional[SplitPaymentIn] = None
    extras: Optional[List[ExtraIn]] = None
    creditor: Optional[CreditorIn] = None
    date: str
    day_name: Optional[str] = None
    time: Optional[str] = None

    @field_validator('date')
    @classmethod
    def valid_date(cls, value):
        parse_date(value)
        return value

    @model_validator(mode='after')
    def payment_details_present(self):
        if self.payment_method == 'split' and self.split_payment is None:
            raise ValueError('splitPayment is required for split payments')
        if self.payment_method == 'creditor' and self.creditor is None:
            raise ValueError('creditor is required for creditor payments')
        if not self.day_name:
            self.day_name = parse_date(self.date).strftime('%A')
        return self

    def payment(self):
        """The tagged payment variant for this request"""
        if self.payment_method == 'split':
            return SplitPayment(**self.split_payment.model_dump())
        if self.payment_method == 'creditor':
            return CreditorPayment(**self.creditor.model_dump())
        return payment_from_fields(self.payment_method)


class StockInEntry(Payload):
    menu_item_id: str = Field(min_length=1)
    stock_in: int = Field(ge=0)


class StartDayIn(Payload):
    items: List[StockInEntry] = Field(default_factory=list)

    @model_validator(mode='after')
    def one_row_per_menu_item(self):
        seen = set()
        for entry in self.items:
            if entry.menu_item_id in seen:
                raise ValueError(f'menu item {entry.menu_item_id} listed more than once')
            seen.add(entry.menu_item_id)
        return self


class StockInUpdate(Payload):
    stock_in: int = Field(ge=0)


class SessionTimeIn(Payload):
    session_id: str = Field(min_length=1)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @model_validator(mode='after')
    def some_time_given(self):
        if self.start_time is None and self.end_time is None:
            raise ValueError('No time updates provided')
        return self
