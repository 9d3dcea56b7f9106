import chama.models
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Chama',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('chama_name', models.CharField(max_length=50)),
                ('chama_description', models.CharField(blank=True, max_length=100)),
                ('chama_created_at', models.DateTimeField(auto_now_add=True)),
                ('chama_created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_chamas', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='MemberInvitation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('invitation_email', models.EmailField(blank=True, max_length=255)),
                ('invitation_token', models.CharField(db_index=True, default=chama.models.generate_invitation_token, max_length=64, unique=True)),
                ('invitation_status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('expired', 'Expired')], db_index=True, default='pending', max_length=8)),
                ('invitation_created_at', models.DateTimeField(auto_now_add=True)),
                ('invitation_chama', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='invitations', to='chama.chama')),
                ('invitation_invited_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sent_invitations', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='Membership',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('membership_join_date', models.DateTimeField(auto_now_add=True)),
                ('membership_status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', max_length=8)),
                ('membership_role', models.CharField(choices=[('member', 'Member'), ('admin', 'Admin'), ('treasurer', 'Treasurer'), ('secretary', 'Secretary')], default='member', max_length=9)),
                ('membership_chama', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='members', to='chama.chama')),
                ('membership_user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memberships', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='JoinRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('join_request_full_name', models.CharField(max_length=100)),
                ('join_request_email', models.EmailField(max_length=255)),
                ('join_request_phone_number', models.CharField(max_length=15)),
                ('join_request_status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('rejected', 'Rejected')], default='pending', max_length=8)),
                ('join_request_requested_at', models.DateTimeField(auto_now_add=True)),
                ('join_request_reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('join_request_chama', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='join_requests', to='chama.chama')),
                ('join_request_invitation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='join_requests', to='chama.memberinvitation')),
                ('join_request_reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_join_requests', to=settings.AUTH_USER_MODEL)),
                ('join_request_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='join_requests', to=settings.AUTH_USER_MODEL)),
            ],
        ),
    ]
