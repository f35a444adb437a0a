from django import forms


class PayloadModelForm(forms.ModelForm):
    """ModelForm bound from a JSON payload.

    `supplied` holds the model field names the caller actually sent, so
    `clean()` can tell an explicit value from one carried over from the
    stored row or the model default.
    """

    def __init__(self, *args, supplied=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.supplied = set(supplied)
