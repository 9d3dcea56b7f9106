import logging

from chama.models import Membership, MemberInvitation, JoinRequest
from common.utils import send_chama_notification

logger = logging.getLogger(__name__)


def get_chama_officials(chama):
    officials = Membership.objects.filter(
        membership_chama=chama,
        membership_role__in=['admin', 'secretary'],
        membership_status='active'
    ).select_related('membership_user')
    return [m.membership_user for m in officials]


def get_pending_invitation(token):
    if not token:
        return None
    return MemberInvitation.objects.select_related('invitation_chama').filter(
        invitation_token=token,
        invitation_status='pending'
    ).first()


def submit_join_request(invitation_token, full_name, email, phone_number):
    """
    Record a join request against a pending invitation and tell the chama officials.

    Returns a dict with ``success`` and ``message`` keys; a failed submission
    is reported through the dict rather than raised.
    """
    invitation = get_pending_invitation(invitation_token)
    if invitation is None:
        return {"success": False, "message": "Invalid or expired invitation link"}

    chama = invitation.invitation_chama
    already_requested = JoinRequest.objects.filter(
        join_request_chama=chama,
        join_request_email__iexact=email,
        join_request_status='pending'
    ).exists()
    if already_requested:
        return {"success": False, "message": "Request already sent."}

    join_request = JoinRequest.objects.create(
        join_request_chama=chama,
        join_request_invitation=invitation,
        join_request_full_name=full_name,
        join_request_email=email,
        join_request_phone_number=phone_number,
    )
    logger.info(f"Join request {join_request.pk} submitted for chama {chama.pk}")

    send_chama_notification(
        chama=chama,
        recipients=get_chama_officials(chama),
        title="New Join Request",
        message=f"{full_name} wants to join {chama.chama_name}.",
        n_type="join_request",
        data={
            "join_request_id": join_request.pk,
            "email": email,
            "phone_number": phone_number,
        },
    )

    return {
        "success": True,
        "message": f"Your request to join {chama.chama_name} has been sent to the admin for approval.",
    }
