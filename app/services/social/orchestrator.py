# app/services/social/orchestrator.py

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional

from ...constants.service_code import ERROR_MESSAGES
from ...utils.logger import Log
from .aggregator import ResultAggregator, error_summary
from .entities import STATUS_FAILED, STATUS_PUBLISHING, OrchestrationResult, PublishAttemptResult, SocialAccount
from .errors import ErrorKind
from .registry import build_publishers
from .settings import PublisherSettings
from .token_manager import TokenManager, utcnow


class PublishOrchestrator:
    """
    Publishes one post to every account it targets.

    Per-account attempts run concurrently and independently; one account's
    failure never affects another's. Once every attempt has finished the
    outcome is written to the post exactly once.
    """

    def __init__(self, store, settings: Optional[PublisherSettings] = None, now=None, publishers=None):
        self.store = store
        self.settings = settings or PublisherSettings.from_config()
        self.now = now or utcnow
        self.token_manager = TokenManager(store, self.settings, now=self.now)
        self.publishers = publishers if publishers is not None else build_publishers(
            self.token_manager, self.settings, now=self.now
        )
        self.aggregator = ResultAggregator(store, now=self.now)

    def run(self, post_id: str) -> OrchestrationResult:
        log_tag = f"[orchestrator.py][PublishOrchestrator][run][{post_id}]"

        try:
            post = self.store.get_post(post_id)
        except Exception as e:
            Log.error(f"{log_tag} loading post failed: {e}")
            return OrchestrationResult(success=False, errors=[f"{ERROR_MESSAGES['POST_LOAD_FAILED']}: {e}"])

        if post is None:
            Log.info(f"{log_tag} post not found")
            return OrchestrationResult(success=False, errors=[ERROR_MESSAGES["POST_NOT_FOUND"]])

        if not post.account_ids:
            Log.info(f"{log_tag} no accounts selected")
            return self._preflight_failed(post, ERROR_MESSAGES["NO_ACCOUNTS_SELECTED"])

        try:
            accounts = {a.id: a for a in self.store.get_accounts(post.account_ids)}
        except Exception as e:
            Log.error(f"{log_tag} loading accounts failed: {e}")
            return self._preflight_failed(post, f"{ERROR_MESSAGES['ACCOUNTS_LOAD_FAILED']}: {e}")

        if not accounts:
            Log.info(f"{log_tag} none of account_ids={post.account_ids} found")
            return self._preflight_failed(post, ERROR_MESSAGES["ACCOUNTS_NOT_FOUND"])

        # duplicates collapse to one attempt per account
        account_ids = list(dict.fromkeys(post.account_ids))
        Log.info(f"{log_tag} publishing to {len(account_ids)} accounts")

        results: Dict[str, PublishAttemptResult] = {}
        to_run = []
        for account_id in account_ids:
            account = accounts.get(account_id)
            if account is None:
                results[account_id] = PublishAttemptResult.failed(
                    account_id, "unknown", ERROR_MESSAGES["ACCOUNT_NOT_FOUND"], ErrorKind.PRECONDITION
                )
            elif account.load_error:
                results[account_id] = PublishAttemptResult.failed(
                    account_id, account.platform, account.load_error, ErrorKind.INTERNAL
                )
            else:
                to_run.append(account)

        if to_run:
            workers = max(1, min(len(to_run), self.settings.max_workers))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="publish") as pool:
                futures = {a.id: pool.submit(self._publish_one, post, a) for a in to_run}
                for account_id, fut in futures.items():
                    results[account_id] = fut.result()

        # keep the post's account order
        ordered = {account_id: results[account_id] for account_id in account_ids}

        update, write_error = self.aggregator.commit(post, ordered)

        errors = error_summary(ordered)
        if write_error:
            errors.append(write_error)

        success = any(r.success for r in ordered.values())
        Log.info(f"{log_tag} done status={update.status} success={success}")
        return OrchestrationResult(success=success, results=ordered, errors=errors, status=update.status)

    def _preflight_failed(self, post, message: str) -> OrchestrationResult:
        """
        Nothing was attempted. A post claimed by the due-post sweep is marked
        failed so it does not stay in publishing; other posts are left as-is.
        """
        errors = [message]
        status = None
        if post.status == STATUS_PUBLISHING:
            write_error = self.aggregator.commit_failure(post, message)
            if write_error:
                errors.append(write_error)
            else:
                status = STATUS_FAILED
        return OrchestrationResult(success=False, errors=errors, status=status)

    def _publish_one(self, post, account: SocialAccount) -> PublishAttemptResult:
        log_tag = f"[orchestrator.py][PublishOrchestrator][_publish_one][{post.id}][{account.id}]"

        adapter = self.publishers.get(account.platform)
        if adapter is None:
            Log.info(f"{log_tag} unsupported platform={account.platform}")
            return PublishAttemptResult.failed(
                account.id,
                account.platform,
                f"Platform {account.platform} not supported yet",
                ErrorKind.PRECONDITION,
            )

        try:
            return adapter.publish(post, account)
        except Exception as e:
            Log.error(f"{log_tag} unexpected error: {e}")
            return PublishAttemptResult.failed(account.id, account.platform, str(e) or type(e).__name__, ErrorKind.INTERNAL)
