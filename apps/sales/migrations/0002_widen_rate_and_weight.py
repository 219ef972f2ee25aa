from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("sales", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="invoice",
            name="rate",
            field=models.DecimalField(
                decimal_places=6,
                help_text="Commodity rate per gram used to price this invoice",
                max_digits=18,
                validators=[django.core.validators.MinValueValidator(Decimal("0.000001"))],
            ),
        ),
        migrations.AlterField(
            model_name="invoiceline",
            name="weight",
            field=models.DecimalField(
                decimal_places=6,
                help_text="Weight in grams used for pricing one unit",
                max_digits=14,
            ),
        ),
    ]
