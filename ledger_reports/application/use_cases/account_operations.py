"""Use case exposing per-account expense, income and transfer sums."""

from datetime import datetime
from typing import Iterable

from ledger_reports.application.ports.ledger_repository import (
    TransactionQuery,
    TransactionQueryPort,
)
from ledger_reports.application.use_cases.report_helpers import (
    as_ids,
    bucket_rows,
    group_journals_by_currency,
)
from ledger_reports.domain.models import (
    CurrencyJournals,
    TransactionRecord,
    TransactionType,
    TransferFlow,
)
from ledger_reports.domain.services import (
    ConversionPolicy,
    GroupKeyFn,
    SignMode,
    TransactionAggregator,
    by_currency,
    by_destination_account,
    by_source_account,
)
from ledger_reports.domain.services.periods import end_of_day, start_of_day
from ledger_reports.infrastructure.logging.logger import get_app_logger
from ledger_reports.utils.decimal_utils import add_exact, negative, positive


class AccountOperationsUseCase:
    """Sum and list journals for a set of asset accounts."""

    def __init__(
        self,
        transaction_repository: TransactionQueryPort,
        policy: ConversionPolicy,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            transaction_repository: Port returning filtered transaction records.
            policy: Conversion policy of the current request.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._transaction_repository = transaction_repository
        self._policy = policy
        self._logger = logger or get_app_logger()
        self._aggregator = TransactionAggregator(policy, logger=self._logger)

    def list_expenses(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
    ) -> dict[int, CurrencyJournals]:
        """Return withdrawals touching the accounts, per native currency."""
        records = self._fetch(
            TransactionQuery(
                start=start,
                end=end,
                types=(TransactionType.WITHDRAWAL,),
                account_ids=as_ids(accounts),
            )
        )
        return group_journals_by_currency(records, SignMode.NEGATIVE)

    def list_income(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
    ) -> dict[int, CurrencyJournals]:
        """Return deposits touching the accounts, per native currency."""
        records = self._fetch(
            TransactionQuery(
                start=start,
                end=end,
                types=(TransactionType.DEPOSIT,),
                account_ids=as_ids(accounts),
            )
        )
        return group_journals_by_currency(records, SignMode.POSITIVE)

    def sum_expenses(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        expense_accounts: Iterable[int] | None = None,
        currency_id: int | None = None,
    ) -> list[dict[str, object]]:
        """Return withdrawal sums per currency."""
        return self._sum(
            TransactionType.WITHDRAWAL,
            start,
            end,
            accounts,
            expense_accounts,
            currency_id,
            by_currency,
        )

    def sum_expenses_by_destination(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        expense_accounts: Iterable[int] | None = None,
        currency_id: int | None = None,
    ) -> list[dict[str, object]]:
        """Return withdrawal sums per destination account and currency."""
        return self._sum(
            TransactionType.WITHDRAWAL,
            start,
            end,
            accounts,
            expense_accounts,
            currency_id,
            by_destination_account,
        )

    def sum_expenses_by_source(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        expense_accounts: Iterable[int] | None = None,
        currency_id: int | None = None,
    ) -> list[dict[str, object]]:
        """Return withdrawal sums per source account and currency."""
        return self._sum(
            TransactionType.WITHDRAWAL,
            start,
            end,
            accounts,
            expense_accounts,
            currency_id,
            by_source_account,
        )

    def sum_income(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        revenue_accounts: Iterable[int] | None = None,
        currency_id: int | None = None,
    ) -> list[dict[str, object]]:
        """Return deposit sums per currency."""
        return self._sum(
            TransactionType.DEPOSIT,
            start,
            end,
            accounts,
            revenue_accounts,
            currency_id,
            by_currency,
        )

    def sum_income_by_destination(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        revenue_accounts: Iterable[int] | None = None,
        currency_id: int | None = None,
    ) -> list[dict[str, object]]:
        """Return deposit sums per destination account and currency."""
        return self._sum(
            TransactionType.DEPOSIT,
            start,
            end,
            accounts,
            revenue_accounts,
            currency_id,
            by_destination_account,
        )

    def sum_income_by_source(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        revenue_accounts: Iterable[int] | None = None,
        currency_id: int | None = None,
    ) -> list[dict[str, object]]:
        """Return deposit sums per source account and currency."""
        return self._sum(
            TransactionType.DEPOSIT,
            start,
            end,
            accounts,
            revenue_accounts,
            currency_id,
            by_source_account,
        )

    def sum_transfers(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        currency_id: int | None = None,
    ) -> list[dict[str, object]]:
        """Return money moved in and out of each account, per currency.

        The source account of a transfer is charged on its ``out`` side and
        the destination account credited on its ``in`` side.

        Args:
            start: First day of the range.
            end: Last day of the range.
            accounts: Optional accounts the transfers must touch.
            currency_id: Optional currency filter (native or foreign).

        Returns:
            list[dict[str, object]]: One row per account and currency.
        """
        records = self._fetch_for_sum(
            TransactionType.TRANSFER, start, end, accounts, None, currency_id
        )
        flows: dict[tuple[int, int], TransferFlow] = {}
        for record in records:
            for leg in self._policy.resolve(record, include_foreign=True):
                source = self._flow(
                    flows,
                    record.source_account_id,
                    record.source_account_name,
                    leg.currency,
                )
                source.amount_out = add_exact(source.amount_out, negative(leg.amount))
                destination = self._flow(
                    flows,
                    record.destination_account_id,
                    record.destination_account_name,
                    leg.currency,
                )
                destination.amount_in = add_exact(
                    destination.amount_in, positive(leg.amount)
                )
        self._logger.info(
            f"Summed {len(records)} transfers into {len(flows)} account flows"
        )
        return [flow.to_dict() for flow in flows.values()]

    @staticmethod
    def _flow(flows, account_id, account_name, currency) -> TransferFlow:
        key = (currency.id, account_id)
        flow = flows.get(key)
        if flow is None:
            flow = TransferFlow(id=account_id, name=account_name, currency=currency)
            flows[key] = flow
        return flow

    def _sum(
        self,
        transaction_type: TransactionType,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None,
        opposing: Iterable[int] | None,
        currency_id: int | None,
        group_key: GroupKeyFn,
    ) -> list[dict[str, object]]:
        records = self._fetch_for_sum(
            transaction_type, start, end, accounts, opposing, currency_id
        )
        sign_mode = (
            SignMode.NEGATIVE
            if transaction_type is TransactionType.WITHDRAWAL
            else SignMode.POSITIVE
        )
        buckets = self._aggregator.aggregate(records, group_key, sign_mode)
        self._logger.info(
            f"Summed {len(records)} {transaction_type.value.lower()} records "
            f"into {len(buckets)} buckets"
        )
        return bucket_rows(buckets.values())

    def _fetch_for_sum(
        self,
        transaction_type: TransactionType,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None,
        opposing: Iterable[int] | None,
        currency_id: int | None,
    ) -> list[TransactionRecord]:
        own = as_ids(accounts)
        other = as_ids(opposing)
        sources: tuple[int, ...] = ()
        destinations: tuple[int, ...] = ()
        either: tuple[int, ...] = ()
        if transaction_type is TransactionType.WITHDRAWAL:
            sources, destinations = own, other
        elif transaction_type is TransactionType.DEPOSIT:
            sources, destinations = other, own
        else:
            either = own
        return self._fetch(
            TransactionQuery(
                start=start_of_day(start),
                end=end_of_day(end),
                types=(transaction_type,),
                account_ids=either,
                source_account_ids=sources,
                destination_account_ids=destinations,
                currency_id=currency_id,
            )
        )

    def _fetch(self, query: TransactionQuery) -> list[TransactionRecord]:
        records = self._transaction_repository.fetch_transactions(query)
        self._logger.debug(f"Fetched {len(records)} records for {query.types}")
        return records


__all__ = ["AccountOperationsUseCase"]
