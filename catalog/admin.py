"""
Catalog — Django Admin Configuration

Products and batches are created here. A batch's current_stock is
read-only: it starts at opening_stock and afterwards moves only through
the inventory ledger, so saving an existing batch never writes either
stock column.

@file catalog/admin.py
"""

from django import forms
from django.contrib import admin
from django.core.exceptions import ValidationError
from django.forms.models import BaseInlineFormSet
from django.utils.translation import gettext_lazy as _

from .models import Batch, Product

# Columns an edit of an existing batch may write.
BATCH_EDITABLE_FIELDS = ('batch_number', 'import_date', 'is_active', 'updated_at')


def save_batch(batch: Batch) -> None:
    """Insert a new batch seeded from opening_stock, or update its descriptive fields only."""
    if batch._state.adding:
        batch.current_stock = batch.opening_stock
        batch.save()
    else:
        batch.save(update_fields=BATCH_EDITABLE_FIELDS)


class BatchInlineForm(forms.ModelForm):
    class Meta:
        model = Batch
        fields = ('batch_number', 'import_date', 'opening_stock', 'is_active')

    def clean_opening_stock(self):
        value = self.cleaned_data['opening_stock']
        if self.instance.pk and value != self.instance.opening_stock:
            raise ValidationError(_('Opening stock cannot be changed once the batch exists.'))
        return value


class BatchInlineFormSet(BaseInlineFormSet):

    def clean(self):
        super().clean()
        for form in self.deleted_forms:
            batch = form.instance
            if batch.pk and batch.inventory_transactions.exists():
                raise ValidationError(
                    _('Batch %(number)s has ledger entries and cannot be deleted.'),
                    params={'number': batch.batch_number},
                )


class BatchInline(admin.TabularInline):
    model = Batch
    form = BatchInlineForm
    formset = BatchInlineFormSet
    extra = 0
    fields = ('batch_number', 'import_date', 'opening_stock', 'current_stock', 'is_active')
    readonly_fields = ('current_stock',)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('product_code', 'product_name', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('product_code', 'product_name')
    ordering = ('product_name',)
    inlines = [BatchInline]

    def save_formset(self, request, form, formset, change):
        batches = formset.save(commit=False)
        for batch in formset.deleted_objects:
            batch.delete()
        for batch in batches:
            save_batch(batch)
        formset.save_m2m()


@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    list_display = (
        'batch_number', 'product', 'import_date',
        'opening_stock', 'current_stock', 'is_active',
    )
    list_filter = ('is_active', 'import_date')
    search_fields = ('batch_number', 'product__product_name', 'product__product_code')
    list_select_related = ('product',)
    date_hierarchy = 'import_date'
    ordering = ('-import_date',)

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return ('current_stock',)
        return ('product', 'opening_stock', 'current_stock')

    def save_model(self, request, obj, form, change):
        save_batch(obj)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.inventory_transactions.exists():
            return False
        return super().has_delete_permission(request, obj)
