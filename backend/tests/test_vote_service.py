"""Tests for issue voting: add, withdraw, switch."""
import pytest

from app.core.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from app.models import Issue, IssueVote
from app.services.vote_service import cast_vote


def reload(db, issue_id) -> Issue:
    db.expire_all()
    return db.get(Issue, issue_id)


def votes_for(db, issue_id) -> list[tuple[str, str]]:
    rows = db.query(IssueVote).filter(IssueVote.issue_id == issue_id).all()
    return sorted((v.user_id, v.vote_type) for v in rows)


class TestCastVote:
    def test_first_vote_is_added(self, db, make_user, make_issue):
        issue = make_issue(reporter=make_user())
        voter = make_user()

        result = cast_vote(db, issue.id, voter.id, "upvote")

        assert (result.action, result.upvotes, result.downvotes) == ("added", 1, 0)
        assert votes_for(db, issue.id) == [(voter.id, "upvote")]
        assert reload(db, issue.id).upvotes == 1

    def test_same_vote_again_withdraws(self, db, make_user, make_issue):
        issue = make_issue()
        voter = make_user()
        cast_vote(db, issue.id, voter.id, "downvote")

        result = cast_vote(db, issue.id, voter.id, "downvote")

        assert (result.action, result.upvotes, result.downvotes) == ("removed", 0, 0)
        assert votes_for(db, issue.id) == []

    def test_other_vote_switches(self, db, make_user, make_issue):
        issue = make_issue()
        voter = make_user()
        cast_vote(db, issue.id, voter.id, "upvote")

        result = cast_vote(db, issue.id, voter.id, "downvote")

        assert (result.action, result.upvotes, result.downvotes) == ("updated", 0, 1)
        assert votes_for(db, issue.id) == [(voter.id, "downvote")]
        stored = reload(db, issue.id)
        assert (stored.upvotes, stored.downvotes) == (0, 1)

    def test_counters_match_vote_rows(self, db, make_user, make_issue):
        issue = make_issue()
        a, b, c = make_user(), make_user(), make_user()
        cast_vote(db, issue.id, a.id, "upvote")
        cast_vote(db, issue.id, b.id, "upvote")
        cast_vote(db, issue.id, c.id, "downvote")
        cast_vote(db, issue.id, b.id, "upvote")
        cast_vote(db, issue.id, c.id, "upvote")

        stored = reload(db, issue.id)
        rows = votes_for(db, issue.id)
        assert stored.upvotes == sum(1 for _, t in rows if t == "upvote") == 2
        assert stored.downvotes == sum(1 for _, t in rows if t == "downvote") == 0

    def test_hidden_issue_can_be_voted(self, db, make_user, make_issue):
        issue = make_issue(is_hidden=True)

        result = cast_vote(db, issue.id, make_user().id, "upvote")

        assert result.upvotes == 1


class TestVoteGuards:
    def test_missing_issue(self, db, make_user):
        with pytest.raises(NotFoundError):
            cast_vote(db, "missing", make_user().id, "upvote")

    def test_own_issue_forbidden_without_mutation(self, db, make_user, make_issue):
        reporter = make_user()
        issue = make_issue(reporter=reporter)

        with pytest.raises(ForbiddenError):
            cast_vote(db, issue.id, reporter.id, "upvote")

        assert votes_for(db, issue.id) == []
        assert reload(db, issue.id).upvotes == 0

    def test_unknown_vote_type(self, db, make_user, make_issue):
        issue = make_issue()

        with pytest.raises(InvalidArgumentError):
            cast_vote(db, issue.id, make_user().id, "sideways")
