"""Tests for pre-activation flow validation"""

from __future__ import annotations

from flowq.flows.consent import MarkerConsentPolicy
from flowq.flows.models import IssueSeverity
from flowq.flows.validate import (
    MISSING_CONSENT_MESSAGE,
    MISSING_TEMPLATE_MESSAGE,
    SUPPRESSION_NOTICE,
    validate_flow,
)


class TestValidationScenarios:
    """Concrete accept/reject cases"""

    def test_email_without_template_rejected(self, make_email, make_manifest):
        manifest = make_manifest([make_email("e", email_type="transactional", template_id=None)])

        result = validate_flow(manifest)

        assert not result.ok
        assert len(result.errors) == 1
        assert result.errors[0].node_id == "e"
        assert "must reference a saved template" in result.errors[0].message

    def test_marketing_without_guard_rejected(self, make_email, make_manifest):
        manifest = make_manifest([make_email("e", template_id="tpl-1")])

        result = validate_flow(manifest)

        assert not result.ok
        assert len(result.errors) == 1
        assert result.errors[0].node_id == "e"
        assert result.errors[0].message == MISSING_CONSENT_MESSAGE
        assert "subscription filter" in result.errors[0].message

    def test_marketing_with_consent_ancestor_accepted(self, make_node, make_email, make_manifest):
        manifest = make_manifest(
            [make_node("c", "condition", label="Marketing Consent"), make_email("e")],
            [("c", "e")],
        )

        result = validate_flow(manifest)

        assert result.ok
        assert len(result.issues) == 1
        assert result.issues[0].severity == IssueSeverity.INFO
        assert result.issues[0].node_id is None
        assert result.issues[0].message == SUPPRESSION_NOTICE

    def test_no_email_actions(self, make_node, make_manifest):
        manifest = make_manifest(
            [
                make_node("t", "trigger", label="Order placed"),
                make_node("a", "action", label="Tag VIP", data={"action": "tag_customer"}),
            ],
            [("t", "a")],
        )

        result = validate_flow(manifest)

        assert result.ok
        assert result.issues == []


class TestValidationRules:
    def test_guard_found_transitively(self, make_node, make_email, make_manifest):
        manifest = make_manifest(
            [
                make_node("t", "trigger"),
                make_node("c", "condition", label="Opted in", data={"field": "marketingSubscribed"}),
                make_node("d", "delay", label="Wait 3 days"),
                make_node("v", "condition", label="Cart value > 50"),
                make_email("e"),
            ],
            [("t", "c"), ("c", "d"), ("d", "v"), ("v", "e")],
        )

        assert validate_flow(manifest).ok

    def test_guard_on_other_branch_does_not_count(self, make_node, make_email, make_manifest):
        manifest = make_manifest(
            [
                make_node("t", "trigger"),
                make_node("c", "condition", label="Marketing consent"),
                make_email("guarded"),
                make_email("unguarded"),
            ],
            [("t", "c"), ("c", "guarded"), ("t", "unguarded")],
        )

        result = validate_flow(manifest)

        assert not result.ok
        assert [issue.node_id for issue in result.errors] == ["unguarded"]

    def test_downstream_guard_does_not_count(self, make_node, make_email, make_manifest):
        manifest = make_manifest(
            [make_email("e"), make_node("c", "condition", label="Marketing consent")],
            [("e", "c")],
        )

        assert not validate_flow(manifest).ok

    def test_both_errors_on_one_node(self, make_email, make_manifest):
        manifest = make_manifest([make_email("e", template_id=None)])

        result = validate_flow(manifest)

        assert [issue.message for issue in result.errors] == [
            MISSING_TEMPLATE_MESSAGE,
            MISSING_CONSENT_MESSAGE,
        ]

    def test_transactional_needs_no_guard(self, make_node, make_email, make_manifest):
        manifest = make_manifest(
            [make_node("t", "trigger"), make_email("e", email_type="transactional")],
            [("t", "e")],
        )

        assert validate_flow(manifest).ok

    def test_single_info_for_many_emails(self, make_email, make_manifest):
        manifest = make_manifest(
            [make_email(f"e{i}", email_type="transactional") for i in range(3)]
        )

        result = validate_flow(manifest)

        assert len(result.infos) == 1

    def test_warning_never_emitted(self, make_node, make_email, make_manifest):
        manifest = make_manifest(
            [make_node("t", "trigger"), make_email("e1", template_id=None), make_email("e2")],
            [("t", "e1"), ("e1", "e2")],
        )

        result = validate_flow(manifest)

        assert all(issue.severity != IssueSeverity.WARNING for issue in result.issues)

    def test_cycle_is_not_an_error(self, make_node, make_email, make_manifest):
        manifest = make_manifest(
            [make_node("c", "condition", label="Marketing consent"), make_email("e")],
            [("c", "e"), ("e", "c")],
        )

        assert validate_flow(manifest).ok

    def test_custom_policy(self, make_node, make_email, make_manifest):
        manifest = make_manifest(
            [make_node("c", "condition", label="Marketing consent"), make_email("e")],
            [("c", "e")],
        )

        assert validate_flow(manifest).ok
        assert not validate_flow(manifest, policy=MarkerConsentPolicy()).ok

    def test_read_only(self, make_email, make_manifest):
        manifest = make_manifest([make_email("e", template_id=None)])
        before = manifest.model_dump()

        validate_flow(manifest)

        assert manifest.model_dump() == before
