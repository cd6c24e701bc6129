from django import forms

from .models import Feedback


class FeedbackForm(forms.ModelForm):
    class Meta:
        model = Feedback
        fields = ["description"]

    def clean_description(self):
        d = (self.cleaned_data.get("description") or "").strip()
        if not d:
            raise forms.ValidationError("Description is required.")
        return d


class FeedbackResponseForm(forms.Form):
    response_text = forms.CharField(error_messages={"required": "Response text is required."})
