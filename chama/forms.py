from django import forms
from chama.models import JoinRequest


class JoinRequestForm(forms.ModelForm):
    class Meta:
        model = JoinRequest
        fields = [
            'join_request_full_name',
            'join_request_email',
            'join_request_phone_number',
        ]
        labels = {
            'join_request_full_name': 'Full Name',
            'join_request_email': 'Email Address',
            'join_request_phone_number': 'Phone Number',
        }
        widgets = {
            'join_request_full_name': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': 'Enter your full name'
            }),
            'join_request_email': forms.EmailInput(attrs={
                'class': 'form-control',
                'placeholder': 'your@email.com'
            }),
            'join_request_phone_number': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': '0712345678'
            }),
        }

    def clean_join_request_full_name(self):
        full_name = self.cleaned_data["join_request_full_name"].strip()
        if len(full_name) < 2:
            raise forms.ValidationError("Name must be at least 2 characters")
        return full_name

    def clean_join_request_email(self):
        return self.cleaned_data["join_request_email"].strip().lower()

    def clean_join_request_phone_number(self):
        phone = self.cleaned_data["join_request_phone_number"].strip()
        if len(phone) < 10:
            raise forms.ValidationError("Phone number must be at least 10 digits")
        return phone
