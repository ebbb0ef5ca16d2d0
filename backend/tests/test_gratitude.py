"""
Tests for gratitude cards.
"""
import pytest

from helpwall import gratitude, settlement, state_machine
from helpwall.errors import (
    GratitudeAlreadySent,
    GratitudeNotFound,
    NotOwner,
    NotReceiver,
    TaskNotCompleted,
    TaskNotFound,
    ValidationError,
)


@pytest.fixture
def completed_task(make_task):
    def _complete(owner_id='owner-1', helper_id='helper-a'):
        task = make_task(owner_id=owner_id)
        state_machine.accept_direct(task['taskId'], helper_id)
        settlement.complete(task['taskId'], owner_id)
        return task
    return _complete


class TestSendThanks:
    """Tests for gratitude.send_thanks."""

    def test_card_goes_to_helper(self, completed_task):
        task = completed_task()

        card = gratitude.send_thanks(task['taskId'], 'owner-1', '  Thank you so much!  ')

        assert card['senderId'] == 'owner-1'
        assert card['receiverId'] == 'helper-a'
        assert card['message'] == 'Thank you so much!'
        assert card['isRead'] is False
        assert gratitude.get_card(task['taskId'])['receiverId'] == 'helper-a'

    def test_second_card_rejected(self, completed_task):
        """One card per task; the first one is never overwritten."""
        task = completed_task()
        gratitude.send_thanks(task['taskId'], 'owner-1', 'Thanks!')

        with pytest.raises(GratitudeAlreadySent):
            gratitude.send_thanks(task['taskId'], 'owner-1', 'Thanks again!')

        assert gratitude.get_card(task['taskId'])['message'] == 'Thanks!'
        assert len(gratitude.list_received('helper-a')) == 1

    def test_task_must_be_completed(self, make_task):
        task = make_task(owner_id='owner-1')
        state_machine.accept_direct(task['taskId'], 'helper-a')

        with pytest.raises(TaskNotCompleted):
            gratitude.send_thanks(task['taskId'], 'owner-1', 'Thanks in advance')

        assert gratitude.get_card(task['taskId']) is None

    def test_only_owner_sends(self, completed_task):
        task = completed_task()

        with pytest.raises(NotOwner):
            gratitude.send_thanks(task['taskId'], 'helper-a', 'Thanks to myself')

    @pytest.mark.parametrize('message', ['', '   ', None])
    def test_message_required(self, completed_task, message):
        task = completed_task()

        with pytest.raises(ValidationError):
            gratitude.send_thanks(task['taskId'], 'owner-1', message)

    def test_unknown_task(self, tables):
        with pytest.raises(TaskNotFound):
            gratitude.send_thanks('missing', 'owner-1', 'Thanks')


class TestReadState:
    """Tests for marking cards read and the unread inbox."""

    def test_mark_read_is_idempotent(self, completed_task):
        task = completed_task()
        gratitude.send_thanks(task['taskId'], 'owner-1', 'Thanks!')

        first = gratitude.mark_read(task['taskId'], 'helper-a')
        second = gratitude.mark_read(task['taskId'], 'helper-a')

        assert first['isRead'] is True
        assert second['isRead'] is True

    def test_only_receiver_marks_read(self, completed_task):
        task = completed_task()
        gratitude.send_thanks(task['taskId'], 'owner-1', 'Thanks!')

        with pytest.raises(NotReceiver):
            gratitude.mark_read(task['taskId'], 'owner-1')

        assert gratitude.get_card(task['taskId'])['isRead'] is False

    def test_mark_read_without_card(self, completed_task):
        task = completed_task()

        with pytest.raises(GratitudeNotFound):
            gratitude.mark_read(task['taskId'], 'helper-a')

    def test_unread_inbox_and_mark_all(self, completed_task):
        first = completed_task(owner_id='owner-1')
        second = completed_task(owner_id='owner-2')
        gratitude.send_thanks(first['taskId'], 'owner-1', 'Thanks!')
        gratitude.send_thanks(second['taskId'], 'owner-2', 'Much appreciated')
        gratitude.mark_read(first['taskId'], 'helper-a')

        unread = gratitude.list_unread('helper-a')

        assert [card['taskId'] for card in unread] == [second['taskId']]
        assert gratitude.mark_all_read('helper-a') == 1
        assert gratitude.list_unread('helper-a') == []
        assert gratitude.mark_all_read('helper-a') == 0

    def test_list_sent(self, completed_task):
        thanked = completed_task(owner_id='owner-1')
        completed_task(owner_id='owner-1')
        gratitude.send_thanks(thanked['taskId'], 'owner-1', 'Thanks!')

        sent = gratitude.list_sent('owner-1')

        assert [card['taskId'] for card in sent] == [thanked['taskId']]
        assert gratitude.list_sent('helper-a') == []
