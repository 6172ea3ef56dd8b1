import pytest
from sqlalchemy.exc import IntegrityError

from marketplace.domain.bids.repository import BidRepository
from marketplace.domain.bids.schemas import BidCreate
from marketplace.domain.bids.service import BidService
from marketplace.domain.contracts.repository import ContractRepository
from marketplace.errors import ConflictError, ForbiddenError, InvalidStateError, NotFoundError
from marketplace.models import Bid, BidStatus, Contract, Project, ProjectStatus

from .conftest import make_bid, make_project


def _bid_input(project, amount=100.0, **fields):
    return BidCreate(projectId=project.id, amount=amount, duration=fields.pop("duration", 5), **fields)


class TestSubmitBid:
    def test_creates_pending_bid(self, db, project, bob):
        bid = BidService(db).submit_bid(_bid_input(project, coverLetter="I can do this"), bob)

        assert bid.id is not None
        assert bid.status == BidStatus.PENDING.value
        assert bid.freelancer_id == bob.id
        assert bid.amount == 100.0
        assert bid.cover_letter == "I can do this"

    def test_blank_cover_letter_is_stored_as_none(self, db, project, bob):
        bid = BidService(db).submit_bid(_bid_input(project, coverLetter="   "), bob)
        assert bid.cover_letter is None

    def test_cover_letter_is_escaped(self, db, project, bob):
        bid = BidService(db).submit_bid(_bid_input(project, coverLetter="<script>x</script>"), bob)
        assert bid.cover_letter == "&lt;script&gt;x&lt;/script&gt;"

    def test_unknown_project(self, db, bob):
        with pytest.raises(NotFoundError):
            BidService(db).submit_bid(BidCreate(projectId=999, amount=10, duration=1), bob)

    @pytest.mark.parametrize(
        "status",
        [
            ProjectStatus.IN_PROGRESS,
            ProjectStatus.COMPLETED,
            ProjectStatus.CANCELLED,
            ProjectStatus.TERMINATED,
        ],
    )
    def test_project_not_open(self, db, alice, bob, status):
        project = make_project(db, alice, status=status)

        with pytest.raises(InvalidStateError) as exc:
            BidService(db).submit_bid(_bid_input(project), bob)

        assert exc.value.status_code == 400
        assert db.query(Bid).count() == 0

    def test_second_bid_by_same_freelancer(self, db, project, bob):
        service = BidService(db)
        service.submit_bid(_bid_input(project, amount=100), bob)

        with pytest.raises(ConflictError) as exc:
            service.submit_bid(_bid_input(project, amount=80), bob)

        assert exc.value.detail == "You have already bid on this project"
        assert db.query(Bid).filter(Bid.project_id == project.id).count() == 1

    def test_duplicate_caught_by_unique_constraint(self, db, project, bob, monkeypatch):
        service = BidService(db)
        service.submit_bid(_bid_input(project), bob)

        # Simulate a concurrent submission that slipped past the lookup
        monkeypatch.setattr(
            BidRepository, "get_bid_by_project_and_freelancer", staticmethod(lambda *args: None)
        )

        with pytest.raises(ConflictError):
            service.submit_bid(_bid_input(project, amount=90), bob)

        assert db.query(Bid).count() == 1

    def test_different_freelancers_may_bid(self, db, project, bob, dave):
        service = BidService(db)
        service.submit_bid(_bid_input(project), bob)
        service.submit_bid(_bid_input(project), dave)

        assert len(service.list_project_bids(project.id)) == 2


class TestUpdateBidStatus:
    def test_accept_creates_contract_and_starts_project(self, db, alice, bob, project):
        bid = make_bid(db, project, bob, amount=100.0)

        updated, contract = BidService(db).update_bid_status(bid.id, "ACCEPTED", alice)

        assert updated.status == BidStatus.ACCEPTED.value
        assert contract.bid_id == bid.id
        assert contract.project_id == project.id
        assert contract.client_id == alice.id
        assert contract.freelancer_id == bob.id
        assert contract.amount == 100.0
        assert contract.status == "ACTIVE"
        assert contract.terms == f"Contract for project: {project.title}"
        assert contract.start_date is not None
        assert contract.end_date is None

        db.refresh(project)
        assert project.status == ProjectStatus.IN_PROGRESS.value
        assert db.query(Contract).count() == 1

    def test_reject_leaves_project_open(self, db, alice, bob, project):
        bid = make_bid(db, project, bob)

        updated, contract = BidService(db).update_bid_status(bid.id, "REJECTED", alice)

        assert updated.status == BidStatus.REJECTED.value
        assert contract is None
        db.refresh(project)
        assert project.status == ProjectStatus.OPEN.value
        assert db.query(Contract).count() == 0

    @pytest.mark.parametrize("first, second", [("ACCEPTED", "ACCEPTED"), ("REJECTED", "ACCEPTED"), ("ACCEPTED", "REJECTED")])
    def test_decided_bid_cannot_change(self, db, alice, bob, project, first, second):
        bid = make_bid(db, project, bob)
        service = BidService(db)
        service.update_bid_status(bid.id, first, alice)

        with pytest.raises(InvalidStateError) as exc:
            service.update_bid_status(bid.id, second, alice)

        assert exc.value.detail == f"Bid has already been {first.lower()}"
        db.refresh(bid)
        assert bid.status == first
        assert db.query(Contract).count() == (1 if first == "ACCEPTED" else 0)

    def test_second_acceptance_on_project_refused(self, db, alice, bob, dave, project):
        first = make_bid(db, project, bob, amount=100)
        second = make_bid(db, project, dave, amount=90)
        service = BidService(db)
        service.update_bid_status(first.id, "ACCEPTED", alice)

        with pytest.raises(InvalidStateError):
            service.update_bid_status(second.id, "ACCEPTED", alice)

        db.refresh(second)
        assert second.status == BidStatus.PENDING.value
        contracts = db.query(Contract).filter(Contract.project_id == project.id).all()
        assert [c.bid_id for c in contracts] == [first.id]

    def test_reject_after_another_bid_accepted(self, db, alice, bob, dave, project):
        first = make_bid(db, project, bob)
        second = make_bid(db, project, dave)
        service = BidService(db)
        service.update_bid_status(first.id, "ACCEPTED", alice)

        updated, _ = service.update_bid_status(second.id, "REJECTED", alice)

        assert updated.status == BidStatus.REJECTED.value

    def test_only_project_owner(self, db, carol, bob, project):
        bid = make_bid(db, project, bob)

        with pytest.raises(ForbiddenError) as exc:
            BidService(db).update_bid_status(bid.id, "ACCEPTED", carol)

        assert exc.value.status_code == 403
        db.refresh(bid)
        assert bid.status == BidStatus.PENDING.value
        assert db.query(Contract).count() == 0

    def test_unknown_bid(self, db, alice):
        with pytest.raises(NotFoundError):
            BidService(db).update_bid_status(12345, "ACCEPTED", alice)

    def test_acceptance_is_all_or_nothing(self, db, alice, bob, project, monkeypatch):
        bid = make_bid(db, project, bob)

        def fail(*args, **kwargs):
            raise RuntimeError("connection lost")

        monkeypatch.setattr(ContractRepository, "add_contract", staticmethod(fail))

        with pytest.raises(RuntimeError):
            BidService(db).update_bid_status(bid.id, "ACCEPTED", alice)

        assert db.get(Bid, bid.id).status == BidStatus.PENDING.value
        assert db.get(Project, project.id).status == ProjectStatus.OPEN.value
        assert db.query(Contract).count() == 0

    def test_failed_project_update_discards_contract(self, db, alice, bob, project, monkeypatch):
        bid = make_bid(db, project, bob)

        def fail(*args, **kwargs):
            raise RuntimeError("connection lost")

        monkeypatch.setattr(ContractRepository, "set_project_status", staticmethod(fail))

        with pytest.raises(RuntimeError):
            BidService(db).update_bid_status(bid.id, "ACCEPTED", alice)

        assert db.get(Bid, bid.id).status == BidStatus.PENDING.value
        assert db.query(Contract).count() == 0


class TestWithdrawBid:
    def test_author_withdraws_pending_bid(self, db, project, bob):
        bid = make_bid(db, project, bob)
        bid_id = bid.id

        result = BidService(db).withdraw_bid(bid_id, bob)

        assert result == {"message": "Bid withdrawn successfully"}
        assert db.get(Bid, bid_id) is None

    def test_other_freelancer_cannot_withdraw(self, db, project, bob, dave):
        bid = make_bid(db, project, bob)

        with pytest.raises(ForbiddenError):
            BidService(db).withdraw_bid(bid.id, dave)

        assert db.get(Bid, bid.id) is not None

    def test_accepted_bid_cannot_be_withdrawn(self, db, alice, bob, project):
        bid = make_bid(db, project, bob)
        service = BidService(db)
        service.update_bid_status(bid.id, "ACCEPTED", alice)

        with pytest.raises(InvalidStateError):
            service.withdraw_bid(bid.id, bob)

        assert db.get(Bid, bid.id).status == BidStatus.ACCEPTED.value

    def test_reference_from_contract_reported_as_invalid_state(self, db, project, bob, monkeypatch):
        bid = make_bid(db, project, bob)

        def fail(*args, **kwargs):
            raise IntegrityError("DELETE FROM bids", {}, Exception("NOT NULL constraint failed: contracts.bid_id"))

        monkeypatch.setattr(BidRepository, "delete_bid", staticmethod(fail))

        with pytest.raises(InvalidStateError) as exc:
            BidService(db).withdraw_bid(bid.id, bob)

        assert exc.value.detail == "Only pending bids can be withdrawn"
        assert db.get(Bid, bid.id) is not None

    def test_withdrawn_bid_allows_new_submission(self, db, project, bob):
        service = BidService(db)
        bid = service.submit_bid(_bid_input(project), bob)
        service.withdraw_bid(bid.id, bob)

        again = service.submit_bid(_bid_input(project, amount=75), bob)

        assert again.amount == 75


class TestReadViews:
    def test_project_bids_unknown_project(self, db):
        with pytest.raises(NotFoundError):
            BidService(db).list_project_bids(404)

    def test_freelancer_bids_span_projects(self, db, alice, bob, dave):
        first = make_project(db, alice, title="First project")
        second = make_project(db, alice, title="Second project")
        make_bid(db, first, bob)
        make_bid(db, second, bob)
        make_bid(db, second, dave)

        bids = BidService(db).list_freelancer_bids(bob.id)

        assert {b.project_id for b in bids} == {first.id, second.id}

    def test_freelancer_without_bids(self, db, bob):
        assert BidService(db).list_freelancer_bids(bob.id) == []
