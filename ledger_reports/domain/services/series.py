"""Fixed-step period series for charts."""

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from ledger_reports.domain.models import (
    BalanceSnapshot,
    ChartDataset,
    Currency,
    PeriodAmount,
    PeriodSeries,
    TransactionRecord,
    TransactionType,
)
from ledger_reports.domain.services.conversion import ConversionPolicy
from ledger_reports.domain.services.periods import (
    Step,
    period_boundaries,
    period_label,
)
from ledger_reports.domain.services.sign import SignMode
from ledger_reports.utils.decimal_utils import (
    ZERO,
    add_exact,
    round_to_places,
    to_plain_string,
)

EARNED = "earned"
SPENT = "spent"

_INCOMING_WHEN_DESTINATION = (
    TransactionType.TRANSFER,
    TransactionType.RECONCILIATION,
    TransactionType.OPENING_BALANCE,
)


def _emit(amount: Decimal, currency: Currency) -> str:
    return to_plain_string(round_to_places(amount, currency.decimal_places))


class PeriodSeriesBuilder:
    """Build balance and flow series over a range of periods.

    Amounts are accumulated exactly and rounded once per entry, to the
    decimal places of the entry's currency.
    """

    def __init__(self, policy: ConversionPolicy, logger=None) -> None:
        """Initialize the builder.

        Args:
            policy: Conversion policy of the current request.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._policy = policy
        self._logger = logger

    def balance_series(
        self,
        snapshots: Iterable[BalanceSnapshot],
        start: datetime,
        end: datetime,
        step: Step,
        currencies: Iterable[Currency] | None = None,
        label: str = "balance",
    ) -> dict[int, PeriodSeries]:
        """Return the balance as of the end of each period, per currency.

        A snapshot is adopted at the first boundary on or after its date and
        carried forward until a later snapshot supersedes it. Currencies
        without any snapshot yet report zero.

        Args:
            snapshots: Balance snapshots in any order.
            start: First day of the range.
            end: Last day of the range.
            step: Period length.
            currencies: Currencies to report even without snapshots.
            label: Label of every produced series.

        Returns:
            dict[int, PeriodSeries]: Series keyed by currency id.
        """
        boundaries = period_boundaries(start, end, step)
        if not boundaries:
            return {}
        ordered = sorted(snapshots, key=lambda snapshot: snapshot.date)
        result = self._seed(
            list(currencies or []) + [snapshot.currency for snapshot in ordered],
            label,
        )
        if not result:
            result = self._seed([self._policy.primary_currency], label)

        last_known: dict[int, Decimal] = {}
        index = 0
        for boundary in boundaries:
            while index < len(ordered) and ordered[index].date <= boundary:
                snapshot = ordered[index]
                last_known[snapshot.currency.id] = snapshot.balance
                index += 1
            key = period_label(boundary, step)
            for currency_id, series in result.items():
                value = last_known.get(currency_id, ZERO)
                series.entries[key] = _emit(value, series.currency)
                if self._policy.convert_to_primary:
                    converted = self._policy.convert(value, series.currency, boundary)
                    series.pc_entries[key] = _emit(
                        converted, self._policy.primary_currency
                    )
        return result

    def flow_series(
        self,
        amounts: Iterable[PeriodAmount],
        start: datetime,
        end: datetime,
        step: Step,
        currencies: Iterable[Currency] | None = None,
        label: str = "",
    ) -> dict[int, PeriodSeries]:
        """Return amounts summed independently per period, per currency.

        Periods without amounts report zero. Amounts dated outside the range
        do not produce entries.

        Args:
            amounts: Signed amounts with their dates.
            start: First day of the range.
            end: Last day of the range.
            step: Period length.
            currencies: Currencies to report even without amounts.
            label: Label of every produced series.

        Returns:
            dict[int, PeriodSeries]: Series keyed by currency id.
        """
        boundaries = period_boundaries(start, end, step)
        if not boundaries:
            return {}
        amounts = list(amounts)
        result = self._seed(
            list(currencies or []) + [item.currency for item in amounts],
            label,
        )
        sums: dict[tuple[int, str], Decimal] = {}
        pc_sums: dict[tuple[int, str], Decimal] = {}
        for item in amounts:
            key = (item.currency.id, period_label(item.date, step))
            sums[key] = add_exact(sums.get(key, ZERO), item.amount)
            if self._policy.convert_to_primary:
                converted = item.primary_amount
                if converted is None:
                    converted = self._policy.convert(
                        item.amount, item.currency, item.date
                    )
                pc_sums[key] = add_exact(pc_sums.get(key, ZERO), converted)

        for boundary in boundaries:
            period = period_label(boundary, step)
            for currency_id, series in result.items():
                key = (currency_id, period)
                series.entries[period] = _emit(sums.get(key, ZERO), series.currency)
                if self._policy.convert_to_primary:
                    series.pc_entries[period] = _emit(
                        pc_sums.get(key, ZERO), self._policy.primary_currency
                    )
        return result

    def income_expense_datasets(
        self,
        records: Iterable[TransactionRecord],
        account_ids: Iterable[int],
        start: datetime,
        end: datetime,
        step: Step,
    ) -> list[ChartDataset]:
        """Return "earned" and "spent" datasets per native currency.

        Deposits are earned, as are transfers, reconciliations and opening
        balances landing in one of ``account_ids``. Everything else is
        spent. The primary currency always gets a pair of datasets.

        Args:
            records: Records touching the requested accounts.
            account_ids: Accounts the chart is drawn for.
            start: First day of the range.
            end: Last day of the range.
            step: Period length.

        Returns:
            list[ChartDataset]: Earned then spent dataset for each currency.
        """
        step = Step.parse(step)
        accounts = set(account_ids)
        flows: dict[str, list[PeriodAmount]] = {EARNED: [], SPENT: []}
        currencies: list[Currency] = [self._policy.primary_currency]
        for record in records:
            direction = self._direction(record, accounts)
            sign_mode = SignMode.POSITIVE if direction == EARNED else SignMode.NEGATIVE
            primary_amount = None
            if self._policy.convert_to_primary:
                primary_amount = sign_mode.apply(self._policy.primary_amount(record))
            flows[direction].append(
                PeriodAmount(
                    date=record.date,
                    currency=record.currency,
                    amount=sign_mode.apply(record.amount),
                    primary_amount=primary_amount,
                )
            )
            currencies.append(record.currency)

        earned = self.flow_series(
            flows[EARNED], start, end, step, currencies, label=EARNED
        )
        spent = self.flow_series(
            flows[SPENT], start, end, step, currencies, label=SPENT
        )
        datasets = []
        for currency_id, series in earned.items():
            for item in (series, spent[currency_id]):
                datasets.append(
                    ChartDataset(
                        label=item.label,
                        chart_type="line",
                        period=step.value,
                        start=start,
                        end=end,
                        series=item,
                    )
                )
        if self._logger is not None:
            self._logger.debug(
                f"Built {len(datasets)} income/expense datasets "
                f"({len(flows[EARNED])} earned, {len(flows[SPENT])} spent)"
            )
        return datasets

    @staticmethod
    def _direction(record: TransactionRecord, account_ids: set[int]) -> str:
        if record.transaction_type is TransactionType.DEPOSIT:
            return EARNED
        if (
            record.transaction_type in _INCOMING_WHEN_DESTINATION
            and record.destination_account_id in account_ids
        ):
            return EARNED
        return SPENT

    def _seed(
        self,
        currencies: Iterable[Currency],
        label: str,
    ) -> dict[int, PeriodSeries]:
        result: dict[int, PeriodSeries] = {}
        for currency in currencies:
            if currency.id not in result:
                result[currency.id] = PeriodSeries(
                    currency=currency,
                    primary_currency=self._policy.primary_currency,
                    label=label,
                )
        return result


__all__ = ["EARNED", "SPENT", "PeriodSeriesBuilder"]
