from django.contrib import admin
from chama.models import Chama, Membership, MemberInvitation, JoinRequest

@admin.register(Chama)
class ChamaAdmin(admin.ModelAdmin):
    list_display = (
        "chama_name",
        "chama_created_by",
        "chama_created_at",
    )
    search_fields = ("chama_name", "chama_description")
    ordering = ("-chama_created_at",)
    readonly_fields = ("chama_created_at",)


@admin.register(Membership)
class MembershipAdmin(admin.ModelAdmin):
    list_display = (
        "membership_user",
        "membership_chama",
        "membership_role",
        "membership_status",
        "membership_join_date",
    )
    list_filter = ("membership_role", "membership_status")
    search_fields = ("membership_user__email", "membership_chama__chama_name")
    ordering = ("-membership_join_date",)
    readonly_fields = ("membership_join_date",)


@admin.register(MemberInvitation)
class MemberInvitationAdmin(admin.ModelAdmin):
    list_display = (
        "invitation_chama",
        "invitation_email",
        "invitation_status",
        "invitation_invited_by",
        "invitation_created_at",
    )
    list_filter = ("invitation_status",)
    search_fields = ("invitation_email", "invitation_token", "invitation_chama__chama_name")
    readonly_fields = ("invitation_token", "invitation_created_at")


@admin.register(JoinRequest)
class JoinRequestAdmin(admin.ModelAdmin):
    list_display = (
        "join_request_full_name",
        "join_request_email",
        "join_request_chama",
        "join_request_status",
        "join_request_requested_at",
        "join_request_reviewed_by",
    )
    list_filter = ("join_request_status", "join_request_requested_at")
    search_fields = (
        "join_request_full_name",
        "join_request_email",
        "join_request_phone_number",
        "join_request_chama__chama_name",
    )
    ordering = ("-join_request_requested_at",)
    readonly_fields = ("join_request_requested_at", "join_request_reviewed_at")
