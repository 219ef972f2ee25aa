"""
Core models for the jewellery point-of-sale backend.

Every business row in the system is owned by a Tenant. Users belong to a
tenant and act on its behalf; StoreSettings carries the per-tenant knobs the
checkout reads (tax rate, low-stock threshold, discount overflow policy).
"""

import uuid
from decimal import Decimal

from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.text import slugify


class Tenant(models.Model):
    """
    Core tenant model for multi-tenancy.

    Each tenant represents one jewellery shop. Inventory, customers, invoices
    and invoice numbering are all scoped to a tenant.
    """

    # Status choices
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"

    STATUS_CHOICES = [
        (ACTIVE, "Active"),
        (SUSPENDED, "Suspended"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the tenant",
    )

    company_name = models.CharField(max_length=255, help_text="Name of the jewellery shop business")

    slug = models.SlugField(
        unique=True, max_length=255, help_text="URL-friendly identifier for the tenant"
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=ACTIVE,
        help_text="Current operational status of the tenant",
    )

    created_at = models.DateTimeField(
        auto_now_add=True, help_text="Timestamp when the tenant was created"
    )

    updated_at = models.DateTimeField(
        auto_now=True, help_text="Timestamp when the tenant was last updated"
    )

    class Meta:
        db_table = "tenants"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="tenant_status_idx"),
        ]
        verbose_name = "Tenant"
        verbose_name_plural = "Tenants"

    def __str__(self):
        return f"{self.company_name} ({self.status})"

    def save(self, *args, **kwargs):
        """
        Override save to auto-generate slug from company_name if not provided.
        """
        if not self.slug:
            self.slug = slugify(self.company_name)
            # Ensure uniqueness by appending UUID if slug already exists
            if Tenant.objects.filter(slug=self.slug).exists():
                self.slug = f"{self.slug}-{str(uuid.uuid4())[:8]}"
        super().save(*args, **kwargs)

    def is_active(self):
        """Check if tenant is in active status."""
        return self.status == self.ACTIVE


class User(AbstractUser):
    """
    Extended user model with tenant association.

    The tenant of the authenticated user is the owner every API call acts for.
    """

    # Role choices
    PLATFORM_ADMIN = "PLATFORM_ADMIN"
    TENANT_OWNER = "TENANT_OWNER"
    TENANT_MANAGER = "TENANT_MANAGER"
    TENANT_EMPLOYEE = "TENANT_EMPLOYEE"

    ROLE_CHOICES = [
        (PLATFORM_ADMIN, "Platform Administrator"),
        (TENANT_OWNER, "Shop Owner"),
        (TENANT_MANAGER, "Shop Manager"),
        (TENANT_EMPLOYEE, "Shop Employee"),
    ]

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="users",
        help_text="Tenant that this user belongs to (null for platform admins)",
    )

    role = models.CharField(
        max_length=50,
        choices=ROLE_CHOICES,
        default=TENANT_EMPLOYEE,
        help_text="User's role in the system",
    )

    phone = models.CharField(
        max_length=20,
        blank=True,
        help_text="User's phone number",
    )

    class Meta:
        db_table = "users"
        ordering = ["username"]
        verbose_name = "User"
        verbose_name_plural = "Users"
        indexes = [
            models.Index(fields=["tenant", "role"], name="user_tenant_role_idx"),
        ]

    def __str__(self):
        if self.tenant:
            return f"{self.username} ({self.get_role_display()} - {self.tenant.company_name})"
        return f"{self.username} ({self.get_role_display()})"

    def is_platform_admin(self):
        """Check if user is a platform administrator."""
        return self.role == self.PLATFORM_ADMIN

    def is_tenant_owner(self):
        """Check if user is a tenant owner."""
        return self.role == self.TENANT_OWNER

    def has_tenant_access(self):
        """Check if user has access to tenant features."""
        return self.tenant_id is not None and self.role in [
            self.TENANT_OWNER,
            self.TENANT_MANAGER,
            self.TENANT_EMPLOYEE,
        ]

    def can_manage_inventory(self):
        """Check if user can manage inventory."""
        return self.role in [self.TENANT_OWNER, self.TENANT_MANAGER]

    def save(self, *args, **kwargs):
        """
        Override save to ensure data consistency.
        """
        # Superusers created without a tenant (createsuperuser) are platform admins
        if self.is_superuser and not self.tenant_id:
            self.role = self.PLATFORM_ADMIN

        # Platform admins should not have a tenant
        if self.role == self.PLATFORM_ADMIN:
            self.tenant = None

        # Tenant users must have a tenant
        if self.role in [self.TENANT_OWNER, self.TENANT_MANAGER, self.TENANT_EMPLOYEE]:
            if not self.tenant_id:
                raise ValueError(f"Users with role {self.role} must have a tenant assigned")

        super().save(*args, **kwargs)


class StoreSettings(models.Model):
    """
    Store-level settings read by the checkout.

    A tenant without a settings row gets the defaults below (3% tax,
    low-stock alert at 5 units, discounts may exceed the subtotal).
    """

    DEFAULT_TAX_RATE = Decimal("3.00")
    DEFAULT_LOW_STOCK_THRESHOLD = 5

    # Discount overflow policies
    ALLOW_NEGATIVE = "allow-negative"
    CLAMP = "clamp"

    DISCOUNT_OVERFLOW_CHOICES = [
        (ALLOW_NEGATIVE, "Allow discount above subtotal (negative taxable amount)"),
        (CLAMP, "Clamp discount to subtotal"),
    ]

    tenant = models.OneToOneField(
        Tenant,
        on_delete=models.CASCADE,
        related_name="store_settings",
        help_text="Tenant that owns these settings",
    )

    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=DEFAULT_TAX_RATE,
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("100.00"))],
        help_text="Tax rate applied to the taxable amount, in percent (e.g., 3.00)",
    )

    low_stock_threshold = models.PositiveIntegerField(
        default=DEFAULT_LOW_STOCK_THRESHOLD,
        help_text="Items at or below this quantity are reported as low stock",
    )

    discount_overflow_policy = models.CharField(
        max_length=20,
        choices=DISCOUNT_OVERFLOW_CHOICES,
        default=ALLOW_NEGATIVE,
        help_text="What to do when an invoice discount exceeds the subtotal",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "store_settings"
        verbose_name = "Store Settings"
        verbose_name_plural = "Store Settings"

    def __str__(self):
        return f"Settings for {self.tenant.company_name}"

    @classmethod
    def for_tenant(cls, tenant):
        """
        Return the tenant's settings, or an unsaved instance carrying the defaults.
        """
        settings = cls.objects.filter(tenant=tenant).first()
        if settings is None:
            settings = cls(tenant=tenant)
        return settings
