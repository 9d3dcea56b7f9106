from django.conf import settings
from django.db import models
from django.utils.crypto import get_random_string

MEMBERSHIP_ROLE_CHOICES = (
    ('member', 'Member'),
    ('admin', 'Admin'),
    ('treasurer', 'Treasurer'),
    ('secretary', 'Secretary'),
)

REQUEST_STATUS_CHOICES = (
    ('pending', 'Pending'),
    ('accepted', 'Accepted'),
    ('rejected', 'Rejected'),
)

INVITATION_STATUS_CHOICES = (
    ('pending', 'Pending'),
    ('accepted', 'Accepted'),
    ('expired', 'Expired'),
)


def generate_invitation_token():
    return get_random_string(32)


class Chama(models.Model):
    chama_name = models.CharField(max_length=50)
    chama_description = models.CharField(max_length=100, blank=True)
    chama_created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='created_chamas'
    )
    chama_created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.chama_name


class Membership(models.Model):
    membership_user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='memberships'
    )
    membership_chama = models.ForeignKey(Chama, on_delete=models.CASCADE, related_name='members')
    membership_join_date = models.DateTimeField(auto_now_add=True)
    membership_status = models.CharField(
        max_length=8,
        choices=[
            ('active', 'Active'),
            ('inactive', 'Inactive')
        ],
        default='active'
    )
    membership_role = models.CharField(max_length=9, choices=MEMBERSHIP_ROLE_CHOICES, default='member')

    def __str__(self):
        return f"{self.membership_user} - {self.membership_chama.chama_name}"


class MemberInvitation(models.Model):
    invitation_chama = models.ForeignKey(Chama, on_delete=models.CASCADE, related_name='invitations')
    invitation_email = models.EmailField(max_length=255, blank=True)
    invitation_token = models.CharField(
        max_length=64, unique=True, db_index=True, default=generate_invitation_token
    )
    invitation_status = models.CharField(
        max_length=8, choices=INVITATION_STATUS_CHOICES, default='pending', db_index=True
    )
    invitation_invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='sent_invitations'
    )
    invitation_created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Invitation to {self.invitation_chama.chama_name} ({self.invitation_status})"


class JoinRequest(models.Model):
    join_request_chama = models.ForeignKey(Chama, on_delete=models.CASCADE, related_name='join_requests')
    join_request_invitation = models.ForeignKey(
        MemberInvitation, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='join_requests'
    )
    join_request_user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='join_requests'
    )
    join_request_full_name = models.CharField(max_length=100)
    join_request_email = models.EmailField(max_length=255)
    join_request_phone_number = models.CharField(max_length=15)
    join_request_status = models.CharField(max_length=8, choices=REQUEST_STATUS_CHOICES, default='pending')
    join_request_requested_at = models.DateTimeField(auto_now_add=True)
    join_request_reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='reviewed_join_requests'
    )
    join_request_reviewed_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"{self.join_request_full_name} → {self.join_request_chama.chama_name} ({self.join_request_status})"
