"""
TaxReturn Assessment - Tax Return Schemas

Pydantic schemas for assessment requests and responses.
"""

import datetime
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.tax_return import (
    BusinessTransaction,
    EmploymentRecord,
    InvestmentLine,
    MonthEntry,
    QualifyingPaymentLine,
    QualifyingPaymentType,
    TaxPaymentRecord,
    TaxPaymentType,
    TransactionType,
)
from app.services.tax_assessment.assessment_service import AssessmentResult, Incomplete
from app.services.tax_assessment.parameters import AssessmentParameters
from app.services.tax_assessment.record_entry import build_investment_line, calculate_deductible


# ===========================================
# ENUMS AS LITERALS
# ===========================================

TransactionTypeEnum = Literal["income", "expense"]
InvestmentTypeEnum = Literal["Rent", "Interest", "Dividend", "Other"]
QualifyingPaymentTypeEnum = Literal["Solar", "Charity", "Government"]
TaxPaymentTypeEnum = Literal["Q1", "Q2", "Q3", "Q4", "Final"]


# ===========================================
# SOURCE DATASET SCHEMAS
# ===========================================

class MonthEntrySchema(BaseModel):
    """One employment month."""
    month_index: int = Field(..., ge=0, le=11)
    estimated_gross: Decimal = Field(Decimal("0"), ge=0)
    estimated_tax: Decimal = Field(Decimal("0"), ge=0)
    actual_gross: Optional[Decimal] = Field(None, ge=0)
    actual_tax: Optional[Decimal] = Field(None, ge=0)


class EmploymentIncomeSchema(BaseModel):
    """Employment income for the year; months not listed count as zero."""
    employer_name: Optional[str] = None
    months: List[MonthEntrySchema] = Field(default_factory=list, max_length=12)

    @field_validator("months")
    @classmethod
    def unique_months(cls, months: List[MonthEntrySchema]) -> List[MonthEntrySchema]:
        indexes = [m.month_index for m in months]
        if len(indexes) != len(set(indexes)):
            raise ValueError("Each month_index may appear only once")
        return months

    def to_record(self) -> EmploymentRecord:
        return EmploymentRecord(
            months=[MonthEntry(**m.model_dump()) for m in self.months],
            employer_name=self.employer_name,
        )


class BusinessTransactionSchema(BaseModel):
    type: TransactionTypeEnum
    category: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., ge=0)
    date: datetime.date

    def to_record(self) -> BusinessTransaction:
        return BusinessTransaction(
            type=TransactionType(self.type),
            category=self.category,
            amount=self.amount,
            date=self.date,
        )


class InvestmentLineSchema(BaseModel):
    """Investment line. WHT is computed from the rate table when omitted."""
    type: InvestmentTypeEnum
    amount: Decimal = Field(..., ge=0)
    withholding_tax: Optional[Decimal] = Field(None, ge=0)
    date: datetime.date
    category: Optional[str] = None

    def to_record(self, parameters: AssessmentParameters) -> InvestmentLine:
        line = build_investment_line(self.type, self.amount, self.date, self.category, parameters)
        if self.withholding_tax is not None:
            line.withholding_tax = self.withholding_tax
        return line


class QualifyingPaymentLineSchema(BaseModel):
    """Qualifying payment. Deductible is capped from the cap table when omitted."""
    type: QualifyingPaymentTypeEnum
    amount: Decimal = Field(..., ge=0)
    deductible: Optional[Decimal] = Field(None, ge=0)
    date: Optional[datetime.date] = None

    def to_record(self, parameters: AssessmentParameters) -> QualifyingPaymentLine:
        payment_type = QualifyingPaymentType(self.type)
        deductible = self.deductible
        if deductible is None:
            deductible = calculate_deductible(payment_type, self.amount, parameters)
        return QualifyingPaymentLine(
            type=payment_type,
            amount=self.amount,
            deductible=deductible,
            date=self.date,
        )


class TaxPaymentSchema(BaseModel):
    type: TaxPaymentTypeEnum
    amount: Decimal = Field(..., ge=0)
    date: datetime.date

    def to_record(self) -> TaxPaymentRecord:
        return TaxPaymentRecord(type=TaxPaymentType(self.type), amount=self.amount, date=self.date)


class AssessmentRequest(BaseModel):
    """
    The five source datasets.

    Omit (or send null for) a dataset that is not available yet; send an empty
    list for a source with nothing recorded.
    """
    employment: Optional[EmploymentIncomeSchema] = None
    business: Optional[List[BusinessTransactionSchema]] = None
    investment: Optional[List[InvestmentLineSchema]] = None
    qualifying_payments: Optional[List[QualifyingPaymentLineSchema]] = None
    tax_payments: Optional[List[TaxPaymentSchema]] = None


# ===========================================
# RESPONSE SCHEMAS
# ===========================================

class InvestmentBucketResponse(BaseModel):
    amount: Decimal
    withholding_tax: Decimal


class SlabBandResponse(BaseModel):
    label: str
    lower: Decimal
    upper: Optional[Decimal]
    rate: Decimal
    band_amount: Decimal
    band_tax: Decimal


class AssessmentResponse(BaseModel):
    """Complete tax return. Amounts are exact decimals, serialised as JSON strings."""
    status: Literal["complete"] = "complete"
    tax_year: str
    employment_income: Decimal
    business_net: Decimal
    investment_income: Decimal
    investment_by_type: Dict[str, InvestmentBucketResponse]
    total_assessable: Decimal
    personal_relief: Decimal
    rental_relief: Decimal
    qualifying_relief: Decimal
    total_reliefs: Decimal
    taxable_income: Decimal
    slab_breakdown: List[SlabBandResponse]
    total_tax_liability: Decimal
    total_paye: Decimal
    total_withholding: Decimal
    total_tax_paid: Decimal
    tax_paid_by_period: Dict[str, Decimal]
    total_credits: Decimal
    balance: Decimal
    is_refund: bool

    @classmethod
    def from_result(cls, result: AssessmentResult) -> "AssessmentResponse":
        return cls(
            tax_year=result.tax_year,
            employment_income=result.employment_income,
            business_net=result.business_net,
            investment_income=result.investment_income,
            investment_by_type={
                t.value: InvestmentBucketResponse(
                    amount=b.amount,
                    withholding_tax=b.withholding_tax,
                )
                for t, b in result.investment_by_type.items()
            },
            total_assessable=result.total_assessable,
            personal_relief=result.personal_relief,
            rental_relief=result.rental_relief,
            qualifying_relief=result.qualifying_relief,
            total_reliefs=result.total_reliefs,
            taxable_income=result.taxable_income,
            slab_breakdown=[
                SlabBandResponse(
                    label=band.label,
                    lower=band.lower,
                    upper=band.upper,
                    rate=band.rate,
                    band_amount=band.band_amount,
                    band_tax=band.band_tax,
                )
                for band in result.slab_breakdown
            ],
            total_tax_liability=result.total_tax_liability,
            total_paye=result.total_paye,
            total_withholding=result.total_withholding,
            total_tax_paid=result.total_tax_paid,
            tax_paid_by_period={t.value: v for t, v in result.tax_paid_by_period.items()},
            total_credits=result.total_credits,
            balance=result.balance,
            is_refund=result.is_refund,
        )


class IncompleteResponse(BaseModel):
    """Sources still missing; not a result, show a loading state."""
    status: Literal["incomplete"] = "incomplete"
    tax_year: str
    missing_sources: List[str]

    @classmethod
    def from_incomplete(cls, incomplete: Incomplete) -> "IncompleteResponse":
        return cls(
            tax_year=incomplete.tax_year,
            missing_sources=[s.value for s in incomplete.missing_sources],
        )


class TaxSlabResponse(BaseModel):
    upper: Optional[Decimal]
    rate: Decimal


class AssessmentParametersResponse(BaseModel):
    tax_year: str
    currency_code: str
    personal_relief_cap: Decimal
    rental_relief_rate: Decimal
    slabs: List[TaxSlabResponse]
    withholding_rates: Dict[str, Decimal]
    qualifying_payment_caps: Dict[str, Optional[Decimal]]

    @classmethod
    def from_parameters(cls, parameters: AssessmentParameters) -> "AssessmentParametersResponse":
        return cls(
            tax_year=parameters.tax_year,
            currency_code=parameters.currency_code,
            personal_relief_cap=parameters.personal_relief_cap,
            rental_relief_rate=parameters.rental_relief_rate,
            slabs=[
                TaxSlabResponse(
                    upper=s.upper,
                    rate=s.rate,
                )
                for s in parameters.slabs
            ],
            withholding_rates={t.value: r for t, r in parameters.withholding_rates.items()},
            qualifying_payment_caps={
                t.value: c for t, c in parameters.qualifying_payment_caps.items()
            },
        )
