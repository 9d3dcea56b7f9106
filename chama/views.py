from django.contrib import messages
from django.shortcuts import redirect, render

from chama.forms import JoinRequestForm
from chama.utils import get_pending_invitation, submit_join_request


def join_chama(request):
    """Invitation landing page: show the join form and submit the request."""
    token = request.GET.get('token') or request.POST.get('token')
    if not token:
        return redirect('/')

    invitation = get_pending_invitation(token)
    chama_name = invitation.invitation_chama.chama_name if invitation else ''

    if request.method == 'POST':
        form = JoinRequestForm(request.POST)
        if form.is_valid():
            result = submit_join_request(
                token,
                form.cleaned_data['join_request_full_name'],
                form.cleaned_data['join_request_email'],
                form.cleaned_data['join_request_phone_number'],
            )
            if result["success"]:
                messages.success(request, result["message"])
                return redirect('/')
            messages.error(request, result["message"] or "Failed to submit join request")
        else:
            messages.error(request, "Please correct the errors below.")
    else:
        form = JoinRequestForm()

    return render(request, 'chama/join_chama.html', {
        'form': form,
        'token': token,
        'chama_name': chama_name,
    })
